from __future__ import annotations

import pytest

from discovery_core.question_bank import DOMAINS
from discovery_core.report import generate_report
from discovery_core.report_html import export_report_html, render, render_parent, render_teen
from discovery_core.types import ModuleResult


def _full(kind: str, **scores: float) -> ModuleResult:
    out = {d: 0 for d in DOMAINS}
    out.update(scores)
    return ModuleResult(type=kind, scores=out)


@pytest.fixture
def builder_report(bank):
    results = {
        "A": _full("interest", A=8, P=2),
        "B": _full("strength", A=9, C=3, P=3),
        "C": _full("skill", A=8, S=6),
        "D": _full("comfort", A=6, C=6, S=6, P=6),
    }
    return generate_report(results, {"age": 16, "parentEmail": "mom@example.com"}, bank=bank)


def test_teen_view_sections(builder_report):
    html = render_teen(builder_report)
    assert "Your Self-Discovery Report" in html
    assert "How your brain works" in html
    assert "<b>Analytical</b>" in html
    assert "Best growth zone" in html
    assert "Analytical Builders" in html
    assert "Safe things to try" in html
    assert "Systems architect" in html
    assert "not finished" not in html


def test_teen_view_caps_opportunities(builder_report):
    builder_report.clusters[0].opportunities = [f"Thing {n}" for n in range(8)]
    html = render_teen(builder_report)
    assert "Thing 4" in html
    assert "Thing 5" not in html


def test_parent_view_sections(builder_report):
    html = render_parent(builder_report)
    assert "Parent Summary" in html
    assert "NOT a medical or psychological diagnosis" in html
    assert "<th>Comfort</th>" in html
    assert "Recommended exploration" in html
    assert "Ages 16-17" in html
    assert "mom@example.com" in html
    # parent view lists at most three opportunities per cluster
    assert "Data scientist" in html
    assert "R&amp;D engineer" in html
    assert "Technical lead roles" not in html


def test_burnout_shown_in_both_views(bank):
    results = {"B": _full("strength", A=7), "D": _full("comfort", A=2, C=2, S=2, P=2)}
    report = generate_report(results, bank=bank)

    assert "What feels draining (for now)" in render_teen(report)
    parent = render_parent(report)
    assert "Burnout risk" in parent
    assert "High strength (7.0) but low comfort (2.0)" in parent


def test_incomplete_report_is_labelled(bank):
    report = generate_report({"A": _full("interest", C=10)}, bank=bank)
    html = render(report, "parent")
    assert "Assessment not finished yet (modules completed: A)" in html
    assert "not measured yet" in html


def test_profile_text_is_escaped(bank):
    report = generate_report({}, {"parentEmail": "<script>@x"}, bank=bank)
    html = render_parent(report)
    assert "<script>" not in html
    assert "&lt;script&gt;@x" in html


def test_unknown_view_rejected(builder_report):
    with pytest.raises(ValueError):
        render(builder_report, "counselor")


def test_export_writes_file(builder_report, tmp_path):
    out = tmp_path / "r.html"
    path = export_report_html(builder_report, str(out), view="parent")
    assert path == str(out)
    assert out.read_text(encoding="utf-8").startswith("<!doctype html>")
