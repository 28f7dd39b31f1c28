#!/usr/bin/env python3
"""
格式化函数 - 模板槽位中可调用的部分
"""

from typing import Any, Callable, Dict, Optional


def _field(record: Any, key: str) -> Any:
    """兼容字典和数据类两种记录"""
    if isinstance(record, dict):
        return record.get(key)
    return getattr(record, key, None)


def format_commit_author_or_name(record: Any) -> str:
    """提交行：有作者账号时显示 @作者，否则回退到作者姓名"""
    message = _field(record, 'message') or ''
    url = _field(record, 'url') or ''
    author = _field(record, 'author')

    if author:
        who = f"@{author}"
    else:
        who = _field(record, 'name') or ''

    return f"- [{message}]({url}) - {who}"


# 配置文件中以 {"formatter": 名称} 引用
FORMATTERS: Dict[str, Callable[[Any], str]] = {
    'author-or-name': format_commit_author_or_name,
}


def resolve_formatter(name: str) -> Optional[Callable[[Any], str]]:
    return FORMATTERS.get(name)


def formatter_name(func: Callable) -> Optional[str]:
    """反查已注册的格式化函数名称，未注册返回 None"""
    for name, registered in FORMATTERS.items():
        if registered is func:
            return name
    return None
