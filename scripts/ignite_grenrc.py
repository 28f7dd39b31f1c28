#!/usr/bin/env python3
"""
weaveworks/ignite 的发布说明配置
"""

from formatters import format_commit_author_or_name
from notes_config import build_config

GRENRC = {
    'dataSource': 'prs',
    'prefix': '',
    'onlyMilestones': False,
    'username': 'weaveworks',
    'repo': 'ignite',
    'groupBy': {
        'New Features': ['kind/feature'],
        'API Changes': ['kind/api-change'],
        'Enhancements': ['kind/enhancement'],
        'Bug Fixes': ['kind/bug'],
        'Documentation': ['kind/documentation'],
        'No category': ['closed'],
    },
    'changelogFilename': 'docs/releases/next.md',
    'ignore-labels': ['kind/cleanup'],
    'template': {
        'commit': format_commit_author_or_name,
        'issue': '- {{labels}} {{name}} ([{{text}}]({{url}}), [@{{user_login}}]({{user_url}}))',
        'label': '',
        'noLabel': 'closed',
        'group': '\n### {{heading}}\n',
        'changelogTitle': '',
        'release': '## {{release}}, {{date}}\n\n{{body}}',
        'releaseSeparator': '\n\n---\n\n',
    },
}

IGNITE_CONFIG = build_config(GRENRC)
