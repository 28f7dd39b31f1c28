#!/usr/bin/env python3
"""
变更日志配置 - 类型定义、校验与序列化

配置在进程启动时构建一次，之后只读，交给渲染流程按引用使用。
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Tuple, Union

from formatters import formatter_name, resolve_formatter
from placeholder_template import placeholders_in

logger = logging.getLogger(__name__)

# 外部工具认可的数据来源
DATA_SOURCES = ('issues', 'commits', 'milestones', 'prs', 'prs-with-issues')

# 配置文件键名 -> TemplateSet 字段名（按渲染顺序）
TEMPLATE_SLOTS = {
    'commit': 'commit',
    'issue': 'issue',
    'label': 'label',
    'noLabel': 'no_label',
    'group': 'group',
    'changelogTitle': 'changelog_title',
    'release': 'release',
    'releaseSeparator': 'release_separator',
}

# 各槽位可用的占位符，超出范围只给警告
SLOT_PLACEHOLDERS = {
    'commit': {'message', 'url', 'author', 'name'},
    'issue': {'labels', 'name', 'text', 'url', 'user_login', 'user_url'},
    'label': {'label'},
    'noLabel': set(),
    'group': {'heading'},
    'changelogTitle': set(),
    'release': {'release', 'date', 'body'},
    'releaseSeparator': set(),
}

REQUIRED_KEYS = ('dataSource', 'username', 'repo', 'groupBy', 'changelogFilename', 'template')
OPTIONAL_KEYS = ('prefix', 'onlyMilestones', 'ignoreLabels', 'ignore-labels')

Slot = Union[str, Callable[[Any], str]]


class ConfigurationError(ValueError):
    """配置缺失、类型错误或取值不受支持"""


@dataclass(frozen=True)
class LabelGroup:
    """一个变更日志分组：标题 + 归入该组的标签"""

    heading: str
    labels: FrozenSet[str]


@dataclass(frozen=True)
class TemplateSet:
    commit: Slot
    issue: Slot
    label: Slot
    no_label: Slot
    group: Slot
    changelog_title: Slot
    release: Slot
    release_separator: Slot


@dataclass(frozen=True)
class ReleaseNotesConfig:
    data_source: str
    prefix: str
    only_milestones: bool
    username: str
    repo: str
    group_by: Tuple[LabelGroup, ...]
    changelog_filename: str
    ignore_labels: FrozenSet[str]
    template: TemplateSet

    @property
    def headings(self) -> List[str]:
        return [group.heading for group in self.group_by]


def _require_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} 必须是字符串，实际为 {type(value).__name__}")
    return value


def _label_set(value: Any, key: str) -> FrozenSet[str]:
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigurationError(f"{key} 必须是标签列表，实际为 {type(value).__name__}")
    for label in value:
        if not isinstance(label, str) or not label:
            raise ConfigurationError(f"{key} 中包含无效标签: {label!r}")
    return frozenset(value)


def _parse_group_by(value: Any) -> Tuple[LabelGroup, ...]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"groupBy 必须是 标题 -> 标签列表 的映射，实际为 {type(value).__name__}")
    if not value:
        raise ConfigurationError("groupBy 不能为空")

    groups = []
    for heading, labels in value.items():
        key = f"groupBy[{heading!r}]"
        _require_str(heading, key)
        label_set = _label_set(labels, key)
        # 空分组永远不会有内容
        if not label_set:
            raise ConfigurationError(f"{key} 至少需要一个标签")
        groups.append(LabelGroup(heading=heading, labels=label_set))
    return tuple(groups)


def _parse_slot(name: str, value: Any) -> Slot:
    key = f"template.{name}"
    if isinstance(value, str):
        unknown = [p for p in placeholders_in(value) if p not in SLOT_PLACEHOLDERS[name]]
        if unknown:
            logger.warning(f"{key} 引用了未知占位符 {unknown}，渲染时将原样保留")
        return value
    if callable(value):
        return value
    if isinstance(value, Mapping) and set(value) == {'formatter'}:
        if not isinstance(value['formatter'], str):
            raise ConfigurationError(f"{key} 的 formatter 必须是字符串，实际为 {type(value['formatter']).__name__}")
        func = resolve_formatter(value['formatter'])
        if func is None:
            raise ConfigurationError(f"{key} 引用了未注册的格式化函数: {value['formatter']!r}")
        return func
    raise ConfigurationError(f"{key} 必须是模板字符串或 {{\"formatter\": 名称}}，实际为 {type(value).__name__}")


def _parse_template(value: Any) -> TemplateSet:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"template 必须是映射，实际为 {type(value).__name__}")

    missing = [slot for slot in TEMPLATE_SLOTS if slot not in value]
    if missing:
        raise ConfigurationError(f"template 缺少槽位: {', '.join(missing)}")
    unknown = [slot for slot in value if slot not in TEMPLATE_SLOTS]
    if unknown:
        raise ConfigurationError(f"template 包含未知槽位: {', '.join(map(str, unknown))}")

    slots = {field: _parse_slot(slot, value[slot]) for slot, field in TEMPLATE_SLOTS.items()}
    return TemplateSet(**slots)


def build_config(raw: Mapping[str, Any]) -> ReleaseNotesConfig:
    """校验原始映射并构建配置，出错立即抛出 ConfigurationError"""
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"配置顶层必须是映射，实际为 {type(raw).__name__}")

    missing = [key for key in REQUIRED_KEYS if key not in raw]
    if missing:
        raise ConfigurationError(f"缺少必填配置项: {', '.join(missing)}")
    unknown = [key for key in raw if key not in REQUIRED_KEYS + OPTIONAL_KEYS]
    if unknown:
        raise ConfigurationError(f"未知配置项: {', '.join(map(str, unknown))}")
    if 'ignoreLabels' in raw and 'ignore-labels' in raw:
        raise ConfigurationError("ignoreLabels 与 ignore-labels 不能同时出现")

    data_source = _require_str(raw['dataSource'], 'dataSource')
    if data_source not in DATA_SOURCES:
        raise ConfigurationError(
            f"不支持的 dataSource: {data_source!r}，可选值: {', '.join(DATA_SOURCES)}"
        )

    only_milestones = raw.get('onlyMilestones', False)
    if not isinstance(only_milestones, bool):
        raise ConfigurationError(f"onlyMilestones 必须是布尔值，实际为 {type(only_milestones).__name__}")

    ignore_key = 'ignore-labels' if 'ignore-labels' in raw else 'ignoreLabels'
    ignore_labels = _label_set(raw.get(ignore_key, []), ignore_key)

    config = ReleaseNotesConfig(
        data_source=data_source,
        prefix=_require_str(raw.get('prefix', ''), 'prefix'),
        only_milestones=only_milestones,
        username=_require_str(raw['username'], 'username'),
        repo=_require_str(raw['repo'], 'repo'),
        group_by=_parse_group_by(raw['groupBy']),
        changelog_filename=_require_str(raw['changelogFilename'], 'changelogFilename'),
        ignore_labels=ignore_labels,
        template=_parse_template(raw['template']),
    )

    # 同时被忽略又被分组的标签，分组永远不会生效
    for group in config.group_by:
        shadowed = group.labels & config.ignore_labels
        if shadowed:
            logger.warning(f"分组 {group.heading!r} 的标签 {sorted(shadowed)} 同时在忽略列表中")

    return config


def _dump_slot(name: str, value: Slot) -> Any:
    if isinstance(value, str):
        return value
    registered = formatter_name(value)
    if registered is None:
        raise ConfigurationError(f"template.{name} 使用了未注册的格式化函数，无法序列化")
    return {'formatter': registered}


def config_to_dict(config: ReleaseNotesConfig) -> Dict[str, Any]:
    """转换为可 JSON 序列化的字典，键名与配置文件一致"""
    return {
        'dataSource': config.data_source,
        'prefix': config.prefix,
        'onlyMilestones': config.only_milestones,
        'username': config.username,
        'repo': config.repo,
        'groupBy': {group.heading: sorted(group.labels) for group in config.group_by},
        'changelogFilename': config.changelog_filename,
        'ignoreLabels': sorted(config.ignore_labels),
        'template': {
            slot: _dump_slot(slot, getattr(config.template, field))
            for slot, field in TEMPLATE_SLOTS.items()
        },
    }
