from __future__ import annotations

from formatters import FORMATTERS, format_commit_author_or_name, formatter_name, resolve_formatter


def test_commit_line_prefers_author() -> None:
    record = {"message": "Fix bug", "url": "http://x/1", "author": "alice", "name": "Alice A."}
    assert format_commit_author_or_name(record) == "- [Fix bug](http://x/1) - @alice"


def test_commit_line_falls_back_to_name() -> None:
    record = {"message": "Fix bug", "url": "http://x/1", "name": "Alice A."}
    assert format_commit_author_or_name(record) == "- [Fix bug](http://x/1) - Alice A."


def test_empty_author_counts_as_absent() -> None:
    record = {"message": "Bump deps", "url": "http://x/2", "author": "", "name": "Bot"}
    line = format_commit_author_or_name(record)
    assert line == "- [Bump deps](http://x/2) - Bot"
    assert "@" not in line


def test_accepts_objects_with_attributes() -> None:
    class Commit:
        message = "Add docs"
        url = "http://x/3"
        author = None
        name = "Bob"

    assert format_commit_author_or_name(Commit()) == "- [Add docs](http://x/3) - Bob"


def test_registry_lookup_both_ways() -> None:
    assert resolve_formatter("author-or-name") is format_commit_author_or_name
    assert resolve_formatter("missing") is None
    assert formatter_name(format_commit_author_or_name) == "author-or-name"
    assert formatter_name(len) is None
    assert set(FORMATTERS) == {"author-or-name"}
