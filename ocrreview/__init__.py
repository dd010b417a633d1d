"""
OCRReview: Review OCR corrections and export them as an interactive PDF.

A vision-language model transcribes an image and flags spelling and
decimal-comma errors. A local dictionary cross-checks the transcription.
The two issue lists are merged, a reviewer accepts or rejects each issue,
and the accepted corrections become comment annotations on a PDF that
embeds the original image.

Example:
    >>> import ocrreview
    >>> config = ocrreview.ReviewConfig(model=ocrreview.ModelConfig.from_env())
    >>> composer = ocrreview.ReportComposer.from_config(config)
    >>> session = composer.process(image_bytes, "receipt.jpg")
    >>> for issue in iter(session.current, None):
    ...     session.accept() if issue.kind is ocrreview.IssueKind.DECIMAL else session.reject()
    >>> composer.build_report().save("out/")
    'out/receipt_OCR_Interactive_Report.pdf'
"""

from ocrreview.config import DictionaryConfig, ModelConfig, ReviewConfig
from ocrreview.exceptions import (
    AnalysisError,
    AnnotationConstructionFailed,
    ConfigurationError,
    DictionaryUnavailable,
    DocumentGenerationFailed,
    MalformedIssue,
    ModelResponseUnparseable,
    OCRReviewError,
    ReviewError,
    SessionComplete,
    SessionIncomplete,
)
from ocrreview.issues import merge_issues, normalize_issue, normalize_issues
from ocrreview.models import (
    AnalysisResult,
    AnnotationPlacement,
    CommentAnnotation,
    CommentMarker,
    CommentPopup,
    ImageLayout,
    Issue,
    IssueKind,
    IssueSource,
    Rect,
    ReportOutput,
)
from ocrreview.ocr import (
    AnalysisService,
    ChatCompletionsAnalyzer,
    DictionaryService,
    DictionaryValidator,
    SpellCheckerDictionary,
)
from ocrreview.report import (
    DocumentWriter,
    PdfDocumentWriter,
    ReportComposer,
    compute_annotation_placement,
    compute_image_layout,
)
from ocrreview.review import Decision, ReviewSession, SessionState

__version__ = "0.1.0"
__all__ = [
    # Main API
    "ReportComposer",
    "ReviewSession",
    "merge_issues",
    "normalize_issue",
    "normalize_issues",
    "compute_image_layout",
    "compute_annotation_placement",
    # Configuration
    "ReviewConfig",
    "ModelConfig",
    "DictionaryConfig",
    # Collaborators
    "AnalysisService",
    "ChatCompletionsAnalyzer",
    "DictionaryService",
    "SpellCheckerDictionary",
    "DictionaryValidator",
    "DocumentWriter",
    "PdfDocumentWriter",
    # Models
    "Issue",
    "IssueKind",
    "IssueSource",
    "Rect",
    "ImageLayout",
    "AnnotationPlacement",
    "CommentMarker",
    "CommentPopup",
    "CommentAnnotation",
    "AnalysisResult",
    "ReportOutput",
    "SessionState",
    "Decision",
    # Exceptions
    "OCRReviewError",
    "MalformedIssue",
    "ModelResponseUnparseable",
    "DictionaryUnavailable",
    "AnalysisError",
    "ReviewError",
    "SessionComplete",
    "SessionIncomplete",
    "AnnotationConstructionFailed",
    "DocumentGenerationFailed",
    "ConfigurationError",
]
