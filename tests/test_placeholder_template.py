from __future__ import annotations

from placeholder_template import generate, placeholders_in


def test_replaces_known_placeholders() -> None:
    assert generate({"heading": "Bug Fixes"}, "\n### {{heading}}\n") == "\n### Bug Fixes\n"


def test_unresolved_placeholders_stay_verbatim() -> None:
    template = "## {{release}}, {{date}}"
    assert generate({"release": "v1.0.0"}, template) == "## v1.0.0, {{date}}"


def test_none_renders_empty() -> None:
    assert generate({"name": None}, "[{{name}}]") == "[]"


def test_repeated_placeholder() -> None:
    assert generate({"x": 1}, "{{x}}-{{x}}") == "1-1"


def test_callable_template_receives_placeholders() -> None:
    seen = []

    def render(placeholders):
        seen.append(dict(placeholders))
        return "ok"

    assert generate({"a": "b"}, render) == "ok"
    assert seen == [{"a": "b"}]


def test_placeholders_in_lists_names_once() -> None:
    template = "- {{labels}} {{name}} ([{{text}}]({{url}}), {{name}})"
    assert placeholders_in(template) == ["labels", "name", "text", "url"]
    assert placeholders_in(lambda p: "") == []
