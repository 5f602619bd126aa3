"""Shared helpers for the HTML dashboards."""

import html
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import quote, urlparse

from hackjudge.models.schemas import Component


@dataclass(frozen=True)
class GradeStyle:
    """Presentation of a letter grade."""

    grade: str
    color: str
    background: str
    description: str


GRADE_STYLES = {
    "A": GradeStyle("A", "#4CAF50", "#E8F5E8", "Excellent"),
    "B": GradeStyle("B", "#8BC34A", "#F1F8E9", "Very Good"),
    "C": GradeStyle("C", "#FFC107", "#FFF8E1", "Good"),
    "D": GradeStyle("D", "#FF9800", "#FFF3E0", "Satisfactory"),
    "F": GradeStyle("F", "#F44336", "#FFEBEE", "Needs Improvement"),
}
UNGRADED = GradeStyle("N/A", "#6c757d", "#f1f3f5", "Not Graded")

# (component, label, short label, icon) in display order
COMPONENTS = [
    (Component.TEST, "Tests & Coverage", "Tests", "🧪"),
    (Component.SONAR, "Code Quality", "Quality", "⚡"),
    (Component.SECURITY, "Security", "Security", "🔒"),
    (Component.FRONTEND, "Frontend UX", "Frontend", "🎨"),
    (Component.TEAM, "Team Collaboration", "Team", "👥"),
    (Component.AI, "AI Attribution", "AI", "🤖"),
]


def esc(value: Any) -> str:
    """HTML-escape any value for element content or a quoted attribute."""
    return html.escape("" if value is None else str(value), quote=True)


def safe_url(url: str | None) -> str:
    """Escaped URL, or "#" unless it is an absolute http(s) URL."""
    if not url:
        return "#"
    try:
        scheme = urlparse(url).scheme
    except ValueError:
        return "#"
    if scheme not in ("http", "https"):
        return "#"
    return esc(url)


def source_link(repository: str | None, branch: str, path: str, line: int | None) -> str:
    """Link to a line of a file on GitHub, escaped for an href attribute."""
    if not repository:
        return "#"
    url = f"https://github.com/{quote(repository)}/blob/{quote(branch)}/{quote(path)}#L{line or 1}"
    return esc(url)


def grade_for_score(score: float) -> str:
    """Letter grade for a raw score, used to color individual components."""
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def grade_style(grade: str | None) -> GradeStyle:
    return GRADE_STYLES.get((grade or "").upper(), UNGRADED)


def format_timestamp(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def page(title: str, styles: str, body: str, script: str = "") -> str:
    """Wrap a body in a self-contained HTML document."""
    script_block = f"\n    <script>\n{script}\n    </script>" if script else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{esc(title)}</title>
    <style>
{styles}
    </style>
</head>
<body>
{body}{script_block}
</body>
</html>
"""
