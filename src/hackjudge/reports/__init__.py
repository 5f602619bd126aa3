"""HTML and markdown renderers."""

from hackjudge.reports.comment import CommentContext, CommentLinks, render_comment
from hackjudge.reports.index_page import render_index, sort_records
from hackjudge.reports.job_summary import render_job_summary
from hackjudge.reports.team_report import render_team_report

__all__ = [
    "CommentContext",
    "CommentLinks",
    "render_comment",
    "render_index",
    "render_job_summary",
    "render_team_report",
    "sort_records",
]
