from __future__ import annotations
from html import escape
from typing import List

from .config import REPORT_TEEN_OPPORTUNITIES, REPORT_PARENT_OPPORTUNITIES
from .question_bank import DOMAIN_LABELS
from .types import Report

VIEWS = ("teen", "parent")

_TIER_LABEL = {"explore": "Explore", "develop": "Develop", "advanced": "Advanced"}

_PARENT_DO = [
    "Encourage exploration without pressure",
    "Celebrate small wins in their interest areas",
    "Respect their natural pace and comfort zones",
    "Ask open-ended questions about what excites them",
]
_PARENT_AVOID = [
    "Forcing them into \"practical\" paths they resist",
    "Comparing them to others",
    "Dismissing low-skill areas, they can grow!",
    "Over-scheduling or pushing burnout-risk areas",
]
_TIMELINE = [
    ("Ages 13-15", "Exploration phase. Let them try many things without commitment."),
    ("Ages 16-17", "Skill-building phase. Support deeper practice in 1-2 areas of strong interest."),
    ("Ages 18-19", "Direction phase. Help refine choices based on learned experience."),
]


def _name(domain: str | None) -> str:
    if not domain:
        return ""
    return escape(DOMAIN_LABELS.get(domain, domain))


def _score(value: float) -> str:
    # 0 means the module behind this column has not measured anything yet
    if not value:
        return "<span class=\"muted\">not measured yet</span>"
    return f"{value:.1f}"


def _bullets(lines: List[str]) -> str:
    return "<ul>" + "".join(f"<li>{escape(line)}</li>" for line in lines) + "</ul>"


def _incomplete_banner(report: Report) -> str:
    if report.is_complete:
        return ""
    done = ", ".join(report.completed_modules) or "none"
    return (
        "<div class=\"banner warning\">"
        f"Assessment not finished yet (modules completed: {escape(done)}). "
        "Scores for unfinished modules show as not measured."
        "</div>"
    )


def _page(title: str, body: str) -> str:
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>{title}</title>
<style>
 body{{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,'Helvetica Neue',Arial}}
 .wrap{{max-width:960px;margin:40px auto;padding:0 16px}}
 h1{{margin:0 0 16px}}
 .banner{{padding:12px 16px;border-radius:6px;margin:16px 0}}
 .banner.warning{{background:#ffe7d9;border:1px solid #f5a623;color:#7a2d00}}
 .muted{{color:#6b7280}}
 table{{border-collapse:collapse;width:100%}}
 th,td{{text-align:left}}
</style>
</head>
<body>
<div class="wrap">
{body}
</div>
</body>
</html>"""


def render_teen(report: Report) -> str:
    primary = report.primary_domain
    scores = report.scores[primary]
    parts: List[str] = ["<h1>Your Self-Discovery Report</h1>", _incomplete_banner(report)]
    parts.append(
        "<p>You've completed a journey of self-discovery! This report isn't about labeling you "
        "or deciding your future. It's about understanding what makes you unique and exploring "
        "paths that align with who you are.</p>"
    )

    parts.append("<h3>How your brain works</h3>")
    parts.append(
        f"<p>You're naturally drawn to <b>{_name(primary)}</b> activities. This means your brain "
        "lights up when you engage in tasks that involve this type of thinking.</p>"
    )
    if report.secondary_domain:
        parts.append(
            f"<p>You also show strength in <b>{_name(report.secondary_domain)}</b> thinking, "
            "which makes you versatile!</p>"
        )

    energy: List[str] = []
    if scores.interest >= 7:
        energy.append(f"<p>You have a <b>strong natural pull</b> toward {_name(primary).lower()} activities.</p>")
        if scores.skill <= 5:
            energy.append(
                "<p>You have amazing <b>growth potential</b> here - your interest is high and you're just getting "
                "started with the skills!</p>"
            )
    if energy:
        parts.append("<h3>What gives you energy</h3>" + "".join(energy))

    if report.burnout_risks:
        items = "".join(
            f"<li><b>{escape(r.domain_name)}</b>: you're capable, but it might stress you out. "
            "Take breaks and don't push too hard here.</li>"
            for r in report.burnout_risks
        )
        parts.append(
            "<h3>What feels draining (for now)</h3>"
            "<p>Even though you're good at some things, they might feel stressful right now:</p>"
            f"<ul>{items}</ul>"
        )

    if report.clusters:
        zones = "".join(
            f"<li><b>{escape(c.name)}</b> ({_TIER_LABEL.get(c.skill_level, c.skill_level)}): "
            f"{escape(c.description)}</li>"
            for c in report.clusters
        )
        parts.append(
            "<h3>Best growth zone</h3>"
            "<p>Based on your profile, here are areas where you can explore and grow:</p>"
            f"<ul>{zones}</ul>"
        )
        tries = "".join(
            f"<h4>{escape(c.name)}</h4>" + _bullets(c.opportunities[:REPORT_TEEN_OPPORTUNITIES])
            for c in report.clusters
        )
        parts.append(
            "<h3>Safe things to try</h3>"
            "<p><i>These are exploration options, not final careers.</i></p>"
            + tries
        )

    return _page("Your Self-Discovery Report", "\n".join(p for p in parts if p))


def render_parent(report: Report) -> str:
    parts: List[str] = ["<h1>Parent Summary</h1>", _incomplete_banner(report)]
    parts.append("<p><b>This is NOT a medical or psychological diagnosis.</b></p>")
    summary = f"<p>Your teen shows primary strength in <b>{_name(report.primary_domain)}</b> thinking"
    if report.secondary_domain:
        summary += f", with secondary ability in <b>{_name(report.secondary_domain)}</b>"
    parts.append(summary + ".</p>")

    rows = "\n".join(
        f"<tr><td>{_name(d)}</td><td>{_score(report.scores[d].interest)}</td>"
        f"<td>{_score(report.scores[d].strength)}</td><td>{_score(report.scores[d].skill)}</td>"
        f"<td>{_score(report.scores[d].comfort)}</td></tr>"
        for d in report.sorted_domains
    )
    parts.append(
        "<h3>Detailed scores</h3>"
        "<p>Understanding these four dimensions helps you support your teen's growth:</p>"
        "<table border='1' cellpadding='6' cellspacing='0'>"
        "<thead><tr><th>Domain</th><th>Interest</th><th>Strength</th><th>Skill</th><th>Comfort</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )

    if report.burnout_risks:
        items = "".join(
            f"<li><b>{escape(r.domain_name)}</b>: High strength ({r.strength:.1f}) but low comfort "
            f"({r.comfort:.1f}). Avoid over-pushing in this area.</li>"
            for r in report.burnout_risks
        )
        parts.append(
            "<h3>Burnout risk</h3>"
            "<p>Your teen shows high ability but low comfort in these areas. "
            "This is a burnout risk signal.</p>"
            f"<ul>{items}</ul>"
        )

    if report.clusters:
        blocks = "".join(
            f"<h4>{escape(c.name)}</h4><p>{escape(c.description)} · level: "
            f"{_TIER_LABEL.get(c.skill_level, c.skill_level)}</p>"
            "<p>Recommended exploration:</p>"
            + _bullets(c.opportunities[:REPORT_PARENT_OPPORTUNITIES])
            for c in report.clusters
        )
        parts.append("<h3>Career clusters</h3>" + blocks)

    parts.append("<h3>How to support your teen</h3><h4>Do</h4>" + _bullets(_PARENT_DO) + "<h4>Avoid</h4>" + _bullets(_PARENT_AVOID))
    parts.append(
        "<h3>Development timeline</h3><ul>"
        + "".join(f"<li><b>{escape(age)}</b>: {escape(text)}</li>" for age, text in _TIMELINE)
        + "</ul>"
    )

    email = report.profile.get("parentEmail") if isinstance(report.profile, dict) else None
    if email:
        parts.append(f"<p class=\"muted\">Report can be shared with {escape(str(email))}.</p>")

    return _page("Parent Summary", "\n".join(p for p in parts if p))


def render(report: Report, view: str = "teen") -> str:
    if view == "teen":
        return render_teen(report)
    if view == "parent":
        return render_parent(report)
    raise ValueError(f"unknown report view {view!r}")


def export_report_html(report: Report, path: str, view: str = "teen") -> str:
    html = render(report, view)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
    return path
