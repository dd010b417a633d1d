"""
Dictionary validation of extracted text.

Cross-checks the model's transcription against a local dictionary. Each
whitespace token that the dictionary rejects, and for which it has a
suggestion, becomes a spelling Issue carrying the token index.

Dictionary support is optional: with no dictionary, or when the
dictionary service fails mid-scan, validation returns no issues.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ocrreview.models import Issue, IssueKind, IssueSource
from ocrreview.ocr.dictionary import DictionaryService

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Cleaned words of this length or shorter are never checked
MAX_SKIPPED_WORD_LENGTH = 2

NON_WORD_PATTERN = re.compile(r"[^\w]")
DIGITS_PATTERN = re.compile(r"^\d+$")

# Tokens that look like identifiers or web addresses rather than words.
# Matched against the raw token and against the token with non-word
# characters removed (so "USA." still counts as an acronym), original case.
SKIP_PATTERNS = (
    re.compile(r"^[A-Z]{2,}$"),  # acronyms
    re.compile(r"^\d+[A-Z]+$"),  # 10KG
    re.compile(r"^[A-Z]+\d+$"),  # A4
    re.compile(r"^www\."),  # URLs
    re.compile(r"\.com$"),  # domains
    re.compile(r"^\w+@\w+\."),  # emails
)

DICTIONARY_DESCRIPTION = "Potential spelling error detected by dictionary check"


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class ValidationStats:
    """Statistics for one validation pass."""

    tokens_checked: int = 0
    issues_found: int = 0
    skipped_short: int = 0
    skipped_numeric: int = 0
    skipped_pattern: int = 0
    skipped_known: int = 0
    no_suggestion: int = 0


# =============================================================================
# DICTIONARY VALIDATOR
# =============================================================================


def replace_first_ignore_case(token: str, word: str, replacement: str) -> str:
    """Replace the first case-insensitive occurrence of `word` in `token`."""
    return re.sub(re.escape(word), lambda _: replacement, token, count=1, flags=re.IGNORECASE)


class DictionaryValidator:
    """
    Flags spelling errors in extracted text using a dictionary service.

    For each whitespace token:
    1. Strip non-word characters and lowercase to get the clean word.
    2. Skip short words (<= 2 chars), numbers and identifier-like tokens.
    3. Skip words the dictionary accepts.
    4. Emit an issue with the top suggestion, if there is one.

    Attributes:
        dictionary: DictionaryService, or None to disable validation.

    Example:
        >>> validator = DictionaryValidator(SpellCheckerDictionary())
        >>> issues = validator.validate("Please recieve the parcel.")
        >>> issues[0].original, issues[0].suggested, issues[0].position
        ('recieve', 'receive', 1)
    """

    def __init__(self, dictionary: DictionaryService | None):
        self.dictionary = dictionary

    @property
    def is_enabled(self) -> bool:
        return self.dictionary is not None

    def _is_skipped_pattern(self, token: str) -> bool:
        stripped = NON_WORD_PATTERN.sub("", token)
        return any(p.search(token) or p.search(stripped) for p in SKIP_PATTERNS)

    def validate(self, text: str) -> list[Issue]:
        """
        Return spelling issues for `text` in token order.

        Never raises; dictionary failures yield an empty list.
        """
        issues, _ = self.validate_with_stats(text)
        return issues

    def validate_with_stats(self, text: str) -> tuple[list[Issue], ValidationStats]:
        """
        Validate text and return statistics.

        Args:
            text: Extracted text.

        Returns:
            Tuple of (issues, statistics).
        """
        stats = ValidationStats()

        if self.dictionary is None or not text or not text.strip():
            return [], stats

        try:
            issues = self._scan(text, stats)
        except Exception as e:
            # Dictionary support is optional; a broken service means no issues
            logger.warning("Dictionary validation failed, skipping: %s", e)
            return [], ValidationStats()

        logger.debug(
            "Dictionary check: %d tokens, %d issues, %d known, %d skipped",
            stats.tokens_checked,
            stats.issues_found,
            stats.skipped_known,
            stats.skipped_short + stats.skipped_numeric + stats.skipped_pattern,
        )
        return issues, stats

    def _scan(self, text: str, stats: ValidationStats) -> list[Issue]:
        issues = []

        for i, token in enumerate(text.split()):
            stats.tokens_checked += 1

            clean = NON_WORD_PATTERN.sub("", token).lower()

            if len(clean) <= MAX_SKIPPED_WORD_LENGTH:
                stats.skipped_short += 1
                continue

            if DIGITS_PATTERN.match(clean):
                stats.skipped_numeric += 1
                continue

            if self._is_skipped_pattern(token):
                stats.skipped_pattern += 1
                continue

            if self.dictionary.check(clean):
                stats.skipped_known += 1
                continue

            suggestions = self.dictionary.suggest(clean)
            if not suggestions:
                stats.no_suggestion += 1
                continue

            issues.append(
                Issue(
                    kind=IssueKind.SPELLING,
                    original=token,
                    suggested=replace_first_ignore_case(token, clean, suggestions[0]),
                    description=DICTIONARY_DESCRIPTION,
                    source=IssueSource.DICTIONARY,
                    position=i,
                )
            )
            stats.issues_found += 1

        return issues
