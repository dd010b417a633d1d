"""
Issue normalization.

Model responses are untyped JSON; the dictionary validator builds Issue
objects directly. Both pass through here so every issue downstream has
the same shape.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ocrreview.exceptions import MalformedIssue
from ocrreview.models import Issue, IssueKind, IssueSource

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Raw source labels seen from the model and older dictionary integrations
SOURCE_ALIASES = {
    "ai": IssueSource.MODEL,
    "model": IssueSource.MODEL,
    "llm": IssueSource.MODEL,
    "dictionary": IssueSource.DICTIONARY,
    "typo.js": IssueSource.DICTIONARY,
    "spellchecker": IssueSource.DICTIONARY,
}

KIND_VALUES = {kind.value: kind for kind in IssueKind}


# =============================================================================
# NORMALIZATION
# =============================================================================


def _required_text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        raise MalformedIssue(f"issue is missing {key!r}")
    if not isinstance(value, str):
        value = str(value)
    if not value.strip():
        raise MalformedIssue(f"issue {key!r} is empty")
    return value


def _parse_kind(value: Any) -> IssueKind:
    if isinstance(value, IssueKind):
        return value
    if not isinstance(value, str) or not value.strip():
        raise MalformedIssue(f"issue type is missing or invalid: {value!r}")
    kind = KIND_VALUES.get(value.strip().lower())
    if kind is None:
        raise MalformedIssue(f"unknown issue type {value!r}")
    return kind


def _parse_source(value: Any, origin: IssueSource) -> IssueSource:
    if isinstance(value, IssueSource):
        return value
    if isinstance(value, str):
        return SOURCE_ALIASES.get(value.strip().lower(), origin)
    return origin


def _parse_position(value: Any) -> int | None:
    # bool is an int subclass; a JSON true is not a position
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def normalize_issue(raw: Issue | Mapping[str, Any], origin: IssueSource) -> Issue:
    """
    Canonicalize one raw issue record.

    Missing `description` becomes "" and missing `source` defaults to
    `origin`. `original`, `suggested` and `type` are required.

    Args:
        raw: A JSON-like mapping or an existing Issue (returned unchanged).
        origin: Which detector the record came from.

    Returns:
        The normalized Issue.

    Raises:
        MalformedIssue: If a required field is missing or empty.

    Example:
        >>> normalize_issue(
        ...     {"type": "decimal", "original": "1,5", "suggested": "1.5"},
        ...     IssueSource.MODEL,
        ... )
        Issue(kind=<IssueKind.DECIMAL: 'decimal'>, original='1,5', suggested='1.5', ...)
    """
    if isinstance(raw, Issue):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedIssue(f"issue must be an object, got {type(raw).__name__}")

    description = raw.get("description")
    return Issue(
        kind=_parse_kind(raw.get("type", raw.get("kind"))),
        original=_required_text(raw, "original"),
        suggested=_required_text(raw, "suggested"),
        description="" if description is None else str(description),
        source=_parse_source(raw.get("source"), origin),
        position=_parse_position(raw.get("position")),
    )


def normalize_issues(
    raws: Iterable[Issue | Mapping[str, Any]],
    origin: IssueSource,
) -> list[Issue]:
    """
    Normalize a batch, dropping malformed records.

    Args:
        raws: Raw issue records.
        origin: Which detector the records came from.

    Returns:
        Normalized issues in input order.
    """
    issues = []
    dropped = 0
    for i, raw in enumerate(raws):
        try:
            issues.append(normalize_issue(raw, origin))
        except MalformedIssue as e:
            dropped += 1
            logger.warning("Dropping malformed %s issue #%d: %s", origin.value, i, e)

    if dropped:
        logger.info("Normalized %d issues (%d dropped)", len(issues), dropped)
    return issues
