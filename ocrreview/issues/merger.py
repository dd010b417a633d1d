"""
Merging of model and dictionary issues.

The model is the priority source: a dictionary issue is kept only if no
model issue has the same (lowercased original, kind) key.

Duplicate matching is plain case-insensitive string equality. Two
unrelated occurrences of the same misspelling at different places in the
text collapse into one entry when one comes from each source.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ocrreview.models import Issue

logger = logging.getLogger(__name__)


def issue_sort_key(issue: Issue) -> tuple[bool, int, str]:
    """Positioned issues first by position; the rest after, by kind."""
    if issue.position is None:
        return (True, 0, issue.kind.value)
    return (False, issue.position, "")


def merge_issues(
    ai_issues: Sequence[Issue],
    dictionary_issues: Sequence[Issue],
) -> tuple[Issue, ...]:
    """
    Combine model and dictionary issues into one ordered sequence.

    Args:
        ai_issues: Normalized issues from the model (kept verbatim).
        dictionary_issues: Normalized issues from the dictionary validator.

    Returns:
        Immutable merged sequence. Issues with a position come first in
        ascending position order; issues without one follow, ordered by
        kind. The sort is stable, so ties keep input order.

    Example:
        >>> merged = merge_issues([ai_recieve], [dict_recieve, dict_teh])
        >>> [i.source.value for i in merged]
        ['AI', 'Dictionary']
    """
    ai_keys = {issue.dedup_key for issue in ai_issues}

    merged = list(ai_issues)
    duplicates = 0
    for issue in dictionary_issues:
        if issue.dedup_key in ai_keys:
            duplicates += 1
            continue
        merged.append(issue)

    merged.sort(key=issue_sort_key)

    logger.debug(
        "Merged %d model + %d dictionary issues -> %d (%d duplicates dropped)",
        len(ai_issues),
        len(dictionary_issues),
        len(merged),
        duplicates,
    )
    return tuple(merged)
