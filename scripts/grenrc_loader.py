#!/usr/bin/env python3
"""
配置文件加载 - 在仓库根目录按约定查找 .grenrc 并解析
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import jsonc
import yaml

from notes_config import ConfigurationError, ReleaseNotesConfig, build_config, config_to_dict

logger = logging.getLogger(__name__)

# 查找顺序
CONFIG_FILENAMES = ('.grenrc', '.grenrc.json', '.grenrc.yml', '.grenrc.yaml')
JS_CONFIG_FILENAME = '.grenrc.js'


def find_config_file(root: Union[str, Path]) -> Optional[Path]:
    """返回根目录下第一个存在的配置文件，找不到返回 None"""
    root = Path(root)
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate

    if (root / JS_CONFIG_FILENAME).is_file():
        raise ConfigurationError(
            f"{root / JS_CONFIG_FILENAME} 是 JavaScript 配置，无法加载；请改写为 .grenrc.json 或 .grenrc.yml"
        )
    return None


def _parse_json(text: str, path: Path) -> Any:
    try:
        return jsonc.loads(text)
    except ValueError as e:
        raise ConfigurationError(f"JSON 解析失败: {path} - {e}") from e


def _parse_yaml(text: str, path: Path) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML 解析失败: {path} - {e}") from e


def read_config_file(path: Union[str, Path]) -> Any:
    """读取并解析配置文件，返回原始数据"""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"无法读取配置文件: {path} - {e}") from e

    suffix = path.suffix.lower()
    if suffix == '.json':
        return _parse_json(text, path)
    if suffix in ('.yml', '.yaml'):
        return _parse_yaml(text, path)

    # 无扩展名的 .grenrc 允许 JSON 或 YAML
    try:
        return jsonc.loads(text)
    except ValueError:
        logger.info(f"{path} 不是 JSON，按 YAML 解析")
        return _parse_yaml(text, path)


def load_config(path_or_root: Union[str, Path]) -> ReleaseNotesConfig:
    """加载配置：传入目录时按约定查找，传入文件时直接读取"""
    target = Path(path_or_root)
    if target.is_dir():
        found = find_config_file(target)
        if found is None:
            raise ConfigurationError(f"在 {target} 下未找到配置文件 ({', '.join(CONFIG_FILENAMES)})")
        target = found

    logger.info(f"加载配置文件: {target}")
    raw = read_config_file(target)
    if raw is None:
        raise ConfigurationError(f"配置文件为空: {target}")
    return build_config(raw)


def dump_config(config: ReleaseNotesConfig, path: Union[str, Path]) -> Path:
    """将配置写出为 JSON"""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        jsonc.dump(config_to_dict(config), f, ensure_ascii=False, indent=4)
    logger.info(f"配置已写出: {path}")
    return path
