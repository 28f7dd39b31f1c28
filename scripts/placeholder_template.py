#!/usr/bin/env python3
"""
占位符模板 - 将 {{key}} 替换为对应的值
"""

import re
from typing import Any, Callable, List, Mapping, Union

PLACEHOLDER_PATTERN = re.compile(r'\{\{(\w+)\}\}')

Template = Union[str, Callable[[Any], str]]


def generate(placeholders: Mapping[str, Any], template: Template) -> str:
    """渲染模板：可调用对象直接调用，字符串做占位符替换"""
    if callable(template):
        return template(placeholders)

    def replace(match):
        key = match.group(1)
        # 未提供的占位符原样保留
        if key not in placeholders:
            return match.group(0)
        value = placeholders[key]
        return '' if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def placeholders_in(template: Template) -> List[str]:
    """列出字符串模板引用的占位符（按出现顺序去重）"""
    if callable(template):
        return []

    names = []
    for name in PLACEHOLDER_PATTERN.findall(template):
        if name not in names:
            names.append(name)
    return names
