"""
Issue normalization and merging.

Example:
    >>> from ocrreview.issues import merge_issues, normalize_issues
    >>> ai = normalize_issues(raw_issues, IssueSource.MODEL)
    >>> merged = merge_issues(ai, dictionary_issues)
"""

from ocrreview.issues.merger import issue_sort_key, merge_issues
from ocrreview.issues.normalizer import normalize_issue, normalize_issues

__all__ = [
    "normalize_issue",
    "normalize_issues",
    "merge_issues",
    "issue_sort_key",
]
