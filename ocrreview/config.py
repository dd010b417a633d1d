"""
Configuration for OCRReview.

All options have sensible defaults except the model API key, which is
read from the environment by ModelConfig.from_env().
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from ocrreview.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"

# A4 in points, the default page of the report document
A4_PAGE_SIZE = (595.28, 841.89)


@dataclass
class ModelConfig:
    """
    Configuration for the vision-language model used for OCR.

    Any OpenAI-compatible chat completions endpoint works
    (OpenAI, OpenRouter, ...).

    Example:
        >>> config = ModelConfig(api_key="sk-...", model="gpt-4o")
        >>> config = ModelConfig.from_env()
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    timeout: float | None = 120.0  # seconds, passed to the HTTP client
    image_detail: str = "high"

    def __post_init__(self):
        """Validate configuration."""
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0, got {self.temperature}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        valid_details = ("low", "high", "auto")
        if self.image_detail not in valid_details:
            raise ValueError(
                f"image_detail must be one of {valid_details}, got {self.image_detail!r}"
            )
        self.base_url = self.base_url.rstrip("/")

    @classmethod
    def from_env(cls, model: str | None = None) -> "ModelConfig":
        """
        Build a config from OPENAI_API_KEY, OPENAI_BASE_URL and OCRREVIEW_MODEL.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is not set.
        """
        api_key = os.environ.get("OPENAI_API_KEY", "")
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        return cls(
            api_key=api_key,
            base_url=os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
            model=model or os.environ.get("OCRREVIEW_MODEL", DEFAULT_MODEL),
        )


@dataclass
class DictionaryConfig:
    """
    Configuration for the local spell-check dictionary.

    Dictionary checking is optional. When the dictionary cannot be
    loaded the review runs in AI-only mode.
    """

    enabled: bool = True
    language: str = "en"
    word_list_path: Path | None = None  # Extra known words, one per line
    additional_vocabulary: set[str] = field(default_factory=set)
    max_suggestions: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.max_suggestions < 1:
            raise ValueError(f"max_suggestions must be >= 1, got {self.max_suggestions}")


@dataclass
class ReviewConfig:
    """
    Top-level configuration for a review run.

    Example:
        >>> config = ReviewConfig(
        ...     model=ModelConfig.from_env(),
        ...     dictionary=DictionaryConfig(language="en"),
        ... )
        >>> composer = ReportComposer.from_config(config)
    """

    model: ModelConfig = field(default_factory=ModelConfig)
    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)

    # Report options
    page_size: tuple[float, float] = A4_PAGE_SIZE
    comment_author: str = "OCR Checker"
    report_suffix: str = "_OCR_Interactive_Report"

    def __post_init__(self):
        """Validate configuration."""
        width, height = self.page_size
        if width <= 0 or height <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size!r}")
