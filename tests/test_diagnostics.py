from __future__ import annotations

from typing import List, Sequence

import pytest

from litelab_engine.buffer import BufferKind, Snapshot
from litelab_engine.diagnostics import Diagnostic, DiagnosticsPipeline
from litelab_engine.diagnostics.pipeline import run_validators
from litelab_engine.diagnostics.validators import (
    UPPERCASE_MESSAGE,
    scan_braces,
    validate_markup,
    validate_script,
    validate_style,
)
from litelab_engine.errors import StyleBalanceError
from litelab_engine.runtime.scheduler import Debouncer
from litelab_engine.snippets import CATALOGUE, SnippetKind


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def test_style_missing_closing_brace() -> None:
    findings = validate_style("a{b{c}")

    assert [(d.level, d.message) for d in findings] == [
        ("error", "Missing closing '}'")
    ]


def test_style_underflow_stops_scanning() -> None:
    findings = validate_style("a}}}}}}}")

    assert [(d.level, d.message) for d in findings] == [("error", "Unexpected '}'")]
    with pytest.raises(StyleBalanceError) as info:
        scan_braces("a}}}}}}}{{{{{{{{{")
    assert info.value.offset == 6


def test_style_uppercase_heuristic_is_crude() -> None:
    findings = validate_style(".BEM__Block { color: red; }")

    assert [(d.level, d.message) for d in findings] == [
        ("warning", UPPERCASE_MESSAGE)
    ]


def test_style_balanced_is_clean() -> None:
    assert validate_style("body { margin: 0; }") == []


def test_markup_unexpected_closing_tag() -> None:
    findings = validate_markup("<div>\n  <p>hi</p>\n</span>\n</div>")

    assert len(findings) == 1
    assert findings[0].level == "error"
    assert "</span>" in findings[0].message


def test_markup_tolerates_void_and_optional_end_tags() -> None:
    text = '<ul><li>one<li>two</ul>\n<img src="a.png">\n<br/>'

    assert validate_markup(text) == []


def test_markup_reports_unclosed_element() -> None:
    findings = validate_markup("<section>\n  <h2>Title</h2>\n")

    assert len(findings) == 1
    assert "<section>" in findings[0].message


def test_script_syntax_error_reports_user_line() -> None:
    findings = validate_script("const a = 1;\nconst = 2;")

    assert len(findings) == 1
    assert findings[0].source is BufferKind.SCRIPT
    assert findings[0].message.startswith("Line 2:")


def test_script_is_parsed_not_executed() -> None:
    assert validate_script("while (true) {}\nreturn 1;") == []


def test_script_reports_stray_closing_brace() -> None:
    findings = validate_script("}\nfunction other() {")

    assert len(findings) == 1
    assert findings[0].message.startswith("Line 1:")


@pytest.mark.parametrize(
    "source",
    [
        "const x = a?.b ?? 1;",
        "class Counter { #count = 0; increment() { return ++this.#count; } }",
        "const big = 10n * 2n;",
        "const btn = document.querySelector('.btn');\nbtn?.addEventListener('click', () => {});",
        "const name = user?.profile?.['name'] ?? 'anon';",
    ],
)
def test_script_accepts_modern_syntax(source: str) -> None:
    assert validate_script(source) == []


def test_catalogue_scripts_validate_clean() -> None:
    scripts = [s for s in CATALOGUE if s.kind is SnippetKind.SCRIPT]

    assert scripts
    for snippet in scripts:
        assert validate_script(snippet.body) == [], snippet.label


def test_run_validators_orders_and_truncates() -> None:
    snapshot = Snapshot(
        markup="</p>",
        style="a{" * 3 + "ABC",
        script="let = ;",
    )

    findings = run_validators(snapshot, limit=6)
    assert [d.source for d in findings] == [
        BufferKind.MARKUP,
        BufferKind.STYLE,
        BufferKind.STYLE,
        BufferKind.SCRIPT,
    ]

    assert len(run_validators(snapshot, limit=2)) == 2


def test_pipeline_debounces_and_replaces_results() -> None:
    clock = FakeClock()
    debouncer = Debouncer(clock=clock)
    state = {"snapshot": Snapshot(style="a{")}
    published: List[Sequence[Diagnostic]] = []
    pipeline = DiagnosticsPipeline(
        debouncer,
        lambda: state["snapshot"],
        set_errors=published.append,
        delay_ms=600,
    )

    pipeline.request(BufferKind.STYLE)
    clock.advance(500)
    pipeline.request(BufferKind.STYLE)
    clock.advance(500)
    debouncer.process_due()
    assert published == []

    clock.advance(100)
    debouncer.process_due()
    assert len(published) == 1
    assert pipeline.passes == 1
    assert pipeline.diagnostics[0].message == "Missing closing '}'"

    state["snapshot"] = Snapshot(style="a{}")
    pipeline.run_now(BufferKind.STYLE)
    assert pipeline.diagnostics == ()


def test_pipeline_validator_crash_degrades_to_error() -> None:
    def crash(text: str) -> List[Diagnostic]:
        raise RuntimeError("validator bug")

    validators = {kind: crash for kind in BufferKind}
    pipeline = DiagnosticsPipeline(
        Debouncer(clock=FakeClock()), Snapshot, validators=validators
    )

    results = pipeline.run_now()

    assert [d.message for d in results] == ["Validation failed"]
