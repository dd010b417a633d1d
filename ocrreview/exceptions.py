"""
Exception classes for OCRReview.

All OCRReview exceptions inherit from OCRReviewError,
making it easy to catch all library errors.

Only AnalysisError and DocumentGenerationFailed are meant to reach the
user. The others are raised and absorbed inside the pipeline (logged as
warnings) or signal a caller error.

Example:
    >>> try:
    ...     composer.process(image_bytes, "scan.png")
    ... except ocrreview.AnalysisError as e:
    ...     print(f"Model call failed: {e}")
    ... except ocrreview.OCRReviewError as e:
    ...     print(f"OCRReview error: {e}")
"""


class OCRReviewError(Exception):
    """
    Base exception for all OCRReview errors.

    Catch this to handle any OCRReview-specific error.
    """

    pass


class MalformedIssue(OCRReviewError):
    """
    Raised when a raw issue record is missing required fields.

    Batch normalization drops the record and continues.
    """

    pass


class ModelResponseUnparseable(OCRReviewError):
    """
    Raised when the model response has no usable JSON object.

    Recovered by treating the raw response as the extracted text.
    """

    pass


class DictionaryUnavailable(OCRReviewError):
    """
    Raised when the spell-check dictionary cannot be loaded.

    Recovered by running in AI-only mode.
    """

    pass


class AnalysisError(OCRReviewError):
    """
    Raised when the OCR/analysis model call fails (network, auth, HTTP status).

    Terminates the current attempt; the user may retry.
    """

    pass


class ReviewError(OCRReviewError):
    """Base class for review session misuse."""

    pass


class SessionComplete(ReviewError):
    """
    Raised when accept/reject is called after the last issue.

    Example:
        >>> session = ReviewSession([])
        >>> session.accept()
        SessionComplete: review session is complete (0/0 issues reviewed)
    """

    pass


class SessionIncomplete(ReviewError):
    """Raised when a report is requested before every issue was reviewed."""

    pass


class AnnotationConstructionFailed(OCRReviewError):
    """
    Raised when a single comment annotation cannot be added to the page.

    The writer skips that annotation and continues with the rest.
    """

    pass


class DocumentGenerationFailed(OCRReviewError):
    """
    Raised when the report document cannot be produced.

    Example:
        >>> writer.write(b"not an image", layout, [])
        DocumentGenerationFailed: image could not be embedded as JPEG or PNG
    """

    pass


class ConfigurationError(OCRReviewError):
    """
    Raised for invalid or missing configuration.

    Example:
        >>> ModelConfig.from_env()
        ConfigurationError: OPENAI_API_KEY is not set
    """

    pass
