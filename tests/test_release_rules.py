from __future__ import annotations

from dataclasses import dataclass

from ignite_grenrc import GRENRC
from notes_config import build_config
from release_rules import filter_releases, parse_version, sort_releases, strip_prefix


@dataclass
class Tag:
    tag: str


def test_parse_version() -> None:
    assert parse_version("v0.10.0") == ((0, 10, 0), True)
    assert parse_version("v1.2.3-rc.1") == ((1, 2, 3), False)
    assert parse_version("ignite-v1.2.3", "ignite-") == ((1, 2, 3), True)
    assert parse_version("nightly") is None


def test_strip_prefix() -> None:
    assert strip_prefix("ignite-v1.0.0", "ignite-") == "v1.0.0"
    assert strip_prefix("v1.0.0", "") == "v1.0.0"


def test_sort_newest_first_numerically() -> None:
    releases = [Tag("v0.9.0"), Tag("nightly"), Tag("v0.10.0"), Tag("v0.10.0-rc.1")]
    ordered = [r.tag for r in sort_releases(releases)]
    assert ordered == ["v0.10.0", "v0.10.0-rc.1", "v0.9.0", "nightly"]


def test_filter_by_prefix() -> None:
    config = build_config({**GRENRC, "prefix": "ignite-"})
    releases = [Tag("ignite-v1.0.0"), Tag("v1.0.0")]
    assert [r.tag for r in filter_releases(releases, config)] == ["ignite-v1.0.0"]


def test_empty_prefix_keeps_everything() -> None:
    config = build_config(GRENRC)
    releases = [Tag("v1.0.0"), Tag("anything")]
    assert filter_releases(releases, config) == releases
