"""Score aggregation and issue merging."""

from hackjudge.analyzers.issues import IssueSet, MergedIssue, merge_quality_issues
from hackjudge.analyzers.scorer import Scorer, safe_int

__all__ = ["IssueSet", "MergedIssue", "Scorer", "merge_quality_issues", "safe_int"]
