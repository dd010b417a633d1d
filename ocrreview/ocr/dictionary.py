"""
Spell-check dictionary service.

The validator only needs two operations, `check(word)` and
`suggest(word)`. DictionaryService is that interface; SpellCheckerDictionary
implements it on top of pyspellchecker, optionally extended with a local
word list.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ocrreview.exceptions import DictionaryUnavailable

if TYPE_CHECKING:
    from spellchecker import SpellChecker

    from ocrreview.config import DictionaryConfig

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_LANGUAGE = "en"
DEFAULT_MAX_SUGGESTIONS = 5


# =============================================================================
# INTERFACE
# =============================================================================


class DictionaryService(ABC):
    """Abstract spell-check dictionary."""

    @abstractmethod
    def check(self, word: str) -> bool:
        """Return True if the dictionary accepts `word`."""
        pass

    @abstractmethod
    def suggest(self, word: str) -> list[str]:
        """Return replacement candidates for `word`, best first. May be empty."""
        pass


# =============================================================================
# PYSPELLCHECKER DICTIONARY
# =============================================================================


@dataclass
class SpellCheckerDictionary(DictionaryService):
    """
    Dictionary backed by pyspellchecker.

    Suggestions are the edit-distance candidates ordered by word frequency
    (most frequent first), ties broken alphabetically so results are
    deterministic.

    Attributes:
        base_spell: Optional SpellChecker instance; built from `language` if None.
        language: pyspellchecker language code.
        word_list_path: Optional file of extra known words, one per line.
        additional_vocabulary: Extra known words.
        max_suggestions: Maximum number of candidates returned by suggest().

    Example:
        >>> d = SpellCheckerDictionary()
        >>> d.check("receive")
        True
        >>> d.suggest("recieve")[0]
        'receive'
    """

    base_spell: SpellChecker | None = field(default=None)
    language: str = DEFAULT_LANGUAGE
    word_list_path: Path | None = None
    additional_vocabulary: set[str] = field(default_factory=set)
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS

    def __post_init__(self) -> None:
        """Load the base dictionary and any local word list."""
        if self.base_spell is None:
            try:
                from spellchecker import SpellChecker

                self.base_spell = SpellChecker(language=self.language)
                logger.debug("Initialized spellchecker for language %r", self.language)
            except ImportError as e:
                raise DictionaryUnavailable("pyspellchecker is not installed") from e
            except ValueError as e:
                # pyspellchecker raises ValueError for unsupported languages
                raise DictionaryUnavailable(
                    f"no dictionary for language {self.language!r}: {e}"
                ) from e

        self.additional_vocabulary = {w.lower() for w in self.additional_vocabulary}

        if self.word_list_path is not None:
            self._load_word_list(self.word_list_path)

    @classmethod
    def from_config(cls, config: DictionaryConfig) -> SpellCheckerDictionary:
        """Create a dictionary from DictionaryConfig."""
        return cls(
            language=config.language,
            word_list_path=config.word_list_path,
            additional_vocabulary=set(config.additional_vocabulary),
            max_suggestions=config.max_suggestions,
        )

    def _load_word_list(self, path: Path) -> None:
        try:
            with open(path, encoding="utf-8") as f:
                words = [line.strip() for line in f if line.strip()]
        except OSError as e:
            raise DictionaryUnavailable(f"cannot read word list {path}: {e}") from e

        self.base_spell.word_frequency.load_words(words)
        logger.info("Loaded %d words from %s", len(words), path)

    def check(self, word: str) -> bool:
        """
        Check if word is known (case-insensitive).

        Example:
            >>> SpellCheckerDictionary().check("philosophy")
            True
        """
        w = word.lower()
        if w in self.additional_vocabulary:
            return True
        return w in self.base_spell

    def suggest(self, word: str) -> list[str]:
        """
        Suggest replacements, most frequent first.

        Args:
            word: The unknown word (case-insensitive).

        Returns:
            Up to `max_suggestions` candidates, never including `word` itself.
        """
        w = word.lower()
        candidates = self.base_spell.candidates(w) or set()
        candidates.discard(w)
        ranked = sorted(
            candidates,
            key=lambda c: (-self.base_spell.word_usage_frequency(c), c),
        )
        return ranked[: self.max_suggestions]


def load_dictionary(config: DictionaryConfig) -> DictionaryService | None:
    """
    Load the configured dictionary, or None for AI-only mode.

    Load failures are logged, not raised.
    """
    if not config.enabled:
        logger.info("Dictionary checking disabled; running in AI-only mode")
        return None
    try:
        return SpellCheckerDictionary.from_config(config)
    except DictionaryUnavailable as e:
        logger.warning("Spell checker unavailable, AI-only mode: %s", e)
        return None
