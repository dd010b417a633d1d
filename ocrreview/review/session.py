"""
Sequential review of merged issues.

A ReviewSession walks a reviewer through the merged issues one at a time.
Each accept or reject moves the cursor forward by one; only accepted
issues are recorded. Once the cursor reaches the end the session is
complete and stays that way. A new document gets a new session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from ocrreview.exceptions import SessionComplete
from ocrreview.models import Issue

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Review session states."""

    REVIEWING = "reviewing"
    COMPLETE = "complete"


class Decision(Enum):
    """Reviewer decision for one issue."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ReviewSession:
    """
    Accept/reject state machine over an immutable issue list.

    Attributes:
        issues: The merged issues under review.
        current_index: Index of the issue awaiting a decision.

    Example:
        >>> session = ReviewSession(merged)
        >>> while not session.is_complete:
        ...     issue = session.current()
        ...     session.accept() if ask(issue) else session.reject()
        >>> len(session.accepted)
        2
    """

    def __init__(self, issues: Iterable[Issue]):
        self.issues: tuple[Issue, ...] = tuple(issues)
        self.current_index = 0
        self._accepted: list[Issue] = []
        self._decisions: list[tuple[Issue, Decision]] = []

    def __len__(self) -> int:
        return len(self.issues)

    def __repr__(self) -> str:
        return (
            f"ReviewSession(state={self.state.value}, "
            f"index={self.current_index}/{len(self.issues)}, "
            f"accepted={len(self._accepted)})"
        )

    @property
    def state(self) -> SessionState:
        if self.current_index >= len(self.issues):
            return SessionState.COMPLETE
        return SessionState.REVIEWING

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE

    @property
    def remaining(self) -> int:
        return len(self.issues) - self.current_index

    @property
    def accepted(self) -> tuple[Issue, ...]:
        """Accepted corrections in review order."""
        return tuple(self._accepted)

    @property
    def decisions(self) -> list[tuple[Issue, Decision]]:
        """Every decision made so far, in order."""
        return list(self._decisions)

    def progress(self) -> tuple[int, int]:
        """Return (reviewed, total)."""
        return self.current_index, len(self.issues)

    def current(self) -> Issue | None:
        """Return the issue awaiting a decision, or None when complete."""
        if self.is_complete:
            return None
        return self.issues[self.current_index]

    def _require_current(self) -> Issue:
        issue = self.current()
        if issue is None:
            raise SessionComplete(
                f"review session is complete "
                f"({self.current_index}/{len(self.issues)} issues reviewed)"
            )
        return issue

    def _advance(self, issue: Issue, decision: Decision) -> None:
        self._decisions.append((issue, decision))
        self.current_index += 1
        logger.debug(
            "Issue %d/%d %s: %r -> %r",
            self.current_index,
            len(self.issues),
            decision.value,
            issue.original,
            issue.suggested,
        )
        if self.is_complete:
            logger.info(
                "Review complete! %d correction(s) accepted.",
                len(self._accepted),
            )

    def accept(self) -> Issue:
        """
        Record the current issue as an accepted correction and advance.

        Returns:
            The accepted issue.

        Raises:
            SessionComplete: If there is no current issue.
        """
        issue = self._require_current()
        self._accepted.append(issue)
        self._advance(issue, Decision.ACCEPTED)
        return issue

    def reject(self) -> Issue:
        """
        Skip the current issue and advance.

        Returns:
            The rejected issue.

        Raises:
            SessionComplete: If there is no current issue.
        """
        issue = self._require_current()
        self._advance(issue, Decision.REJECTED)
        return issue
