#!/usr/bin/env python3
"""
版本规则 - 标签前缀过滤与版本排序
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# 去掉前缀后的版本号: [v]数字.数字[.数字][-预发布标识]
VERSION_PATTERN = re.compile(r'^v?(\d+(?:\.\d+)*)(-[0-9A-Za-z.-]+)?$')


def matches_prefix(tag: str, prefix: str) -> bool:
    """判断标签是否带有配置的前缀（空前缀匹配所有标签）"""
    return tag.startswith(prefix)


def strip_prefix(tag: str, prefix: str) -> str:
    if prefix and tag.startswith(prefix):
        return tag[len(prefix):]
    return tag


def parse_version(tag: str, prefix: str = '') -> Optional[Tuple[Tuple[int, ...], bool]]:
    """解析版本号，返回 (数字元组, 是否正式版)；非版本号标签返回 None"""
    match = VERSION_PATTERN.match(strip_prefix(tag, prefix))
    if not match:
        return None
    numbers = tuple(int(num) for num in match.group(1).split('.'))
    is_final = match.group(2) is None
    return numbers, is_final


def sort_releases(releases: Sequence, prefix: str = '') -> List:
    """按版本号排序（从新到旧），无法解析的标签排在最后并保持原顺序"""
    def version_key(release):
        parsed = parse_version(release.tag, prefix)
        if parsed is None:
            logger.warning(f"版本排序: 无法解析标签 {release.tag}，排在末尾")
            return (0, (), False)
        numbers, is_final = parsed
        # 同号版本中正式版排在预发布版之前
        return (1, numbers, is_final)

    return sorted(releases, key=version_key, reverse=True)


def filter_releases(releases: Sequence, config) -> List:
    """只保留标签带有配置前缀的发布"""
    kept = []
    for release in releases:
        if matches_prefix(release.tag, config.prefix):
            kept.append(release)
        else:
            logger.info(f"跳过前缀不匹配的发布: {release.tag} (前缀: {config.prefix!r})")
    return kept
