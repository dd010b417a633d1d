"""Interactive review of detected issues."""

from ocrreview.review.session import Decision, ReviewSession, SessionState

__all__ = [
    "ReviewSession",
    "SessionState",
    "Decision",
]
