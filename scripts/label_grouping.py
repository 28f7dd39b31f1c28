#!/usr/bin/env python3
"""
标签分组 - 按 groupBy 将 issue/PR 归入变更日志分组

同一条目命中多个分组时，取声明顺序中的第一个分组。
标签集合中含 "..." 的分组兜底接收未命中任何分组的条目。
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from notes_config import LabelGroup, ReleaseNotesConfig
from placeholder_template import generate

logger = logging.getLogger(__name__)

CATCH_ALL_LABEL = '...'


def effective_labels(entry, config: ReleaseNotesConfig) -> Tuple[str, ...]:
    """条目的标签；没有标签时使用 noLabel 模板生成的占位标签"""
    labels = tuple(entry.labels)
    if labels:
        return labels
    no_label = generate({}, config.template.no_label)
    return (no_label,) if no_label else ()


def is_ignored(entry, config: ReleaseNotesConfig) -> bool:
    return any(label in config.ignore_labels for label in entry.labels)


def match_group(labels: Iterable[str], config: ReleaseNotesConfig) -> Optional[LabelGroup]:
    """返回第一个与标签有交集的分组，未命中时返回兜底分组或 None"""
    labels = set(labels)
    for group in config.group_by:
        if group.labels & labels:
            return group

    for group in config.group_by:
        if CATCH_ALL_LABEL in group.labels:
            return group
    return None


def group_entries(entries: Sequence, config: ReleaseNotesConfig) -> List[Tuple[LabelGroup, list]]:
    """分组条目，按声明顺序输出非空分组"""
    buckets = {group.heading: [] for group in config.group_by}

    for entry in entries:
        if is_ignored(entry, config):
            logger.info(f"忽略条目: {entry.title} (标签: {list(entry.labels)})")
            continue

        group = match_group(effective_labels(entry, config), config)
        if group is None:
            logger.warning(f"条目未匹配任何分组，已丢弃: {entry.title} (标签: {list(entry.labels)})")
            continue
        buckets[group.heading].append(entry)

    return [(group, buckets[group.heading]) for group in config.group_by if buckets[group.heading]]
