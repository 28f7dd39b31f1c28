from __future__ import annotations

from changelog_generator import IssueRecord
from ignite_grenrc import GRENRC, IGNITE_CONFIG
from label_grouping import effective_labels, group_entries, is_ignored, match_group
from notes_config import build_config


def _issue(number: int, *labels: str) -> IssueRecord:
    return IssueRecord(number=number, title=f"change {number}", url=f"http://x/{number}", labels=labels)


def _headings(grouped) -> list:
    return [(group.heading, [entry.number for entry in entries]) for group, entries in grouped]


def test_entries_land_in_their_groups() -> None:
    entries = [_issue(1, "kind/bug"), _issue(2, "kind/feature"), _issue(3, "kind/documentation")]
    assert _headings(group_entries(entries, IGNITE_CONFIG)) == [
        ("New Features", [2]),
        ("Bug Fixes", [1]),
        ("Documentation", [3]),
    ]


def test_first_declared_group_wins() -> None:
    group = match_group(["kind/bug", "kind/feature"], IGNITE_CONFIG)
    assert group.heading == "New Features"


def test_ignored_label_excludes_entry_everywhere() -> None:
    entries = [_issue(1, "kind/bug", "kind/cleanup"), _issue(2, "kind/cleanup")]
    assert is_ignored(entries[0], IGNITE_CONFIG)
    assert group_entries(entries, IGNITE_CONFIG) == []


def test_unlabelled_entry_uses_no_label_bucket() -> None:
    entry = _issue(7)
    assert effective_labels(entry, IGNITE_CONFIG) == ("closed",)
    assert _headings(group_entries([entry], IGNITE_CONFIG)) == [("No category", [7])]


def test_unmatched_entry_dropped_without_catch_all() -> None:
    assert match_group(["area/network"], IGNITE_CONFIG) is None
    assert group_entries([_issue(1, "area/network")], IGNITE_CONFIG) == []


def test_catch_all_group() -> None:
    config = build_config({**GRENRC, "groupBy": {"Fixes": ["kind/bug"], "Other": ["..."]}})
    entries = [_issue(1, "area/network"), _issue(2, "kind/bug")]
    assert _headings(group_entries(entries, config)) == [("Fixes", [2]), ("Other", [1])]


def test_empty_no_label_leaves_unlabelled_entry_out() -> None:
    template = {**GRENRC["template"], "noLabel": ""}
    config = build_config({**GRENRC, "template": template})
    assert effective_labels(_issue(1), config) == ()
    assert group_entries([_issue(1)], config) == []
