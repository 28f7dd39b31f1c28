#!/usr/bin/env python3
"""
主入口 - 根据配置把已获取的发布数据渲染成变更日志

发布数据（PR/issue/提交）由外部获取后以 JSON 记录文件传入，
本模块只负责分组、模板渲染和写出文件。
"""

import logging
import sys
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import jsonc

from grenrc_loader import find_config_file, load_config
from ignite_grenrc import IGNITE_CONFIG
from label_grouping import effective_labels, group_entries
from notes_config import ConfigurationError, ReleaseNotesConfig
from placeholder_template import generate
from release_rules import filter_releases, sort_releases

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitRecord:
    message: str
    url: str
    author: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class IssueRecord:
    number: int
    title: str
    url: str
    labels: Tuple[str, ...] = ()
    user_login: str = ''
    user_url: str = ''
    milestone: Optional[str] = None


@dataclass(frozen=True)
class ReleaseRecord:
    tag: str
    date: str
    name: Optional[str] = None
    issues: Tuple[IssueRecord, ...] = field(default_factory=tuple)
    commits: Tuple[CommitRecord, ...] = field(default_factory=tuple)


def _build_record(cls, data: Any, where: str):
    if not isinstance(data, dict):
        raise ConfigurationError(f"{where} 必须是对象，实际为 {type(data).__name__}")
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigurationError(f"{where} 字段不正确: {e}") from e


def _require_list(value: Any, where: str) -> list:
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{where} 必须是列表，实际为 {type(value).__name__}")
    return list(value)


def _check_fields(record, where: str, required: Sequence[str], optional: Sequence[str] = ()) -> None:
    """必填字段必须是字符串，可选字段为字符串或 null"""
    for name in required:
        value = getattr(record, name)
        if not isinstance(value, str):
            raise ConfigurationError(f"{where}.{name} 必须是字符串，实际为 {type(value).__name__}")
    for name in optional:
        value = getattr(record, name)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"{where}.{name} 必须是字符串或 null，实际为 {type(value).__name__}")


def parse_records(raw: Any) -> List[ReleaseRecord]:
    """把原始 JSON 数据转换为发布记录"""
    if not isinstance(raw, dict) or not isinstance(raw.get('releases'), list):
        raise ConfigurationError("记录文件顶层必须是 {\"releases\": [...]}")

    releases = []
    for i, item in enumerate(raw['releases']):
        where = f"releases[{i}]"
        if not isinstance(item, dict):
            raise ConfigurationError(f"{where} 必须是对象，实际为 {type(item).__name__}")

        issues = []
        for j, issue in enumerate(_require_list(item.get('issues', []), f"{where}.issues")):
            issue_where = f"{where}.issues[{j}]"
            record = _build_record(IssueRecord, issue, issue_where)
            _check_fields(record, issue_where, ('title', 'url'), ('user_login', 'user_url', 'milestone'))
            labels = _require_list(record.labels, f"{issue_where}.labels")
            for label in labels:
                if not isinstance(label, str):
                    raise ConfigurationError(
                        f"{issue_where}.labels 中的标签必须是字符串，实际为 {type(label).__name__}"
                    )
            issues.append(replace(record, labels=tuple(labels)))

        commits = []
        for j, commit in enumerate(_require_list(item.get('commits', []), f"{where}.commits")):
            commit_where = f"{where}.commits[{j}]"
            record = _build_record(CommitRecord, commit, commit_where)
            _check_fields(record, commit_where, ('message', 'url'), ('author', 'name'))
            commits.append(record)

        fields = {k: v for k, v in item.items() if k not in ('issues', 'commits')}
        fields['issues'] = tuple(issues)
        fields['commits'] = tuple(commits)
        release = _build_record(ReleaseRecord, fields, where)
        _check_fields(release, where, ('tag', 'date'), ('name',))
        releases.append(release)

    return releases


def load_records(path) -> List[ReleaseRecord]:
    """读取发布记录文件"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = jsonc.load(f)
    except OSError as e:
        raise ConfigurationError(f"无法读取记录文件: {path} - {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"记录文件 JSON 解析失败: {path} - {e}") from e

    releases = parse_records(raw)
    logger.info(f"读取到 {len(releases)} 个发布")
    return releases


def format_date(value: str) -> str:
    """ISO 日期转为 DD/MM/YYYY，其他格式原样返回"""
    if not value:
        return ''
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return value
    return parsed.strftime('%d/%m/%Y')


def render_commit(record: CommitRecord, config: ReleaseNotesConfig) -> str:
    # 只取提交信息首行
    message = record.message.split('\n', 1)[0]
    placeholders = {
        'message': message,
        'url': record.url,
        'author': record.author,
        'name': record.name,
    }
    return generate(placeholders, config.template.commit)


def render_labels(labels: Sequence[str], config: ReleaseNotesConfig) -> str:
    return ''.join(
        generate({'label': label}, config.template.label)
        for label in labels
        if label not in config.ignore_labels
    )


def render_issue(record: IssueRecord, config: ReleaseNotesConfig) -> str:
    placeholders = {
        'labels': render_labels(effective_labels(record, config), config),
        'name': record.title,
        'text': f"#{record.number}",
        'url': record.url,
        'user_login': record.user_login,
        'user_url': record.user_url,
    }
    return generate(placeholders, config.template.issue)


def render_group(heading: str, config: ReleaseNotesConfig) -> str:
    return generate({'heading': heading}, config.template.group)


def render_release_body(release: ReleaseRecord, config: ReleaseNotesConfig) -> str:
    """渲染单个发布的正文"""
    if config.data_source == 'commits':
        return '\n'.join(render_commit(commit, config) for commit in release.commits)

    issues = list(release.issues)
    if config.only_milestones:
        issues = [issue for issue in issues if issue.milestone]

    sections = []
    for group, entries in group_entries(issues, config):
        lines = '\n'.join(render_issue(entry, config) for entry in entries)
        sections.append(render_group(group.heading, config) + '\n' + lines)
    return '\n'.join(sections)


def render_release(release: ReleaseRecord, config: ReleaseNotesConfig) -> str:
    placeholders = {
        'release': release.name or release.tag,
        'date': format_date(release.date),
        'body': render_release_body(release, config),
    }
    return generate(placeholders, config.template.release)


def generate_changelog(releases: Sequence[ReleaseRecord], config: ReleaseNotesConfig) -> str:
    """生成变更日志内容"""
    selected = sort_releases(filter_releases(releases, config), config.prefix)
    logger.info(f"渲染 {len(selected)} 个发布 (数据来源: {config.data_source})")

    title = generate({}, config.template.changelog_title)
    separator = generate({}, config.template.release_separator)
    return title + separator.join(render_release(release, config) for release in selected)


def write_changelog(content: str, config: ReleaseNotesConfig, root='.') -> Path:
    """写出到 changelogFilename（相对于仓库根目录）"""
    output_file = Path(root) / config.changelog_filename
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info(f"变更日志已生成: {output_file}")
    return output_file


def resolve_config(root) -> ReleaseNotesConfig:
    """优先使用根目录下的配置文件，没有则使用内置的 ignite 配置"""
    if find_config_file(root) is None:
        logger.info(f"{root} 下没有配置文件，使用内置配置")
        return IGNITE_CONFIG
    return load_config(root)


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )
    args = sys.argv[1:] if argv is None else argv

    if not args:
        print("用法: changelog_generator.py RECORDS.json [ROOT]")
        print("      changelog_generator.py check [ROOT]")
        return 2

    root = args[1] if len(args) > 1 else '.'

    try:
        config = resolve_config(root)
        if args[0] == 'check':
            groups = ', '.join(config.headings)
            print(f"配置有效: {config.username}/{config.repo}, 分组: {groups}")
            return 0

        releases = load_records(args[0])
        content = generate_changelog(releases, config)
    except ConfigurationError as e:
        logger.error(f"配置错误: {e}")
        return 1

    try:
        output_file = write_changelog(content, config, root)
    except OSError as e:
        logger.error(f"写入变更日志失败: {e}")
        return 1

    # 显示预览
    print("\n=== 变更日志预览 ===")
    lines = content.split('\n')
    for line in lines[:20]:
        print(line)

    if len(lines) > 20:
        print(f"... (完整内容请查看 {output_file})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
