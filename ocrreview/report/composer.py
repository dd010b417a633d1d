"""
Report composer: the end-to-end review workflow for one image.

1. Model extraction (text + model-detected issues)
2. Dictionary cross-validation of the extracted text
3. Merge into one ordered issue list
4. Interactive review (the caller accepts/rejects each issue)
5. PDF report with one comment per accepted correction

Nothing is written until build_report(), so abandoning a review at any
point leaves no side effects. Each composer holds at most one document;
process() starts over and reset() discards the current one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ocrreview.config import ReviewConfig
from ocrreview.exceptions import SessionIncomplete
from ocrreview.issues.merger import merge_issues
from ocrreview.models import (
    AnalysisResult,
    AnnotationPlacement,
    CommentAnnotation,
    CommentMarker,
    CommentPopup,
    Issue,
    ReportOutput,
)
from ocrreview.ocr.analysis import AnalysisService, ChatCompletionsAnalyzer, analyze_image
from ocrreview.ocr.dictionary import DictionaryService, load_dictionary
from ocrreview.ocr.validator import DictionaryValidator
from ocrreview.report.layout import compute_image_layout, compute_placements
from ocrreview.report.pdf import DocumentWriter, PdfDocumentWriter, read_image_size
from ocrreview.report.text import comment_text, report_filename
from ocrreview.review.session import ReviewSession

logger = logging.getLogger(__name__)


def annotation_id(index: int) -> str:
    """Stable id shared by the marker and popup of the `index`-th comment."""
    return f"ocr-comment-{index + 1:04d}"


def build_comment_annotations(
    accepted: Sequence[Issue],
    placements: Sequence[AnnotationPlacement],
) -> list[CommentAnnotation]:
    """
    Pair accepted corrections with their placements.

    Raises:
        ValueError: If the sequences differ in length.
    """
    if len(accepted) != len(placements):
        raise ValueError(f"{len(accepted)} corrections but {len(placements)} placements")

    annotations = []
    for issue, placement in zip(accepted, placements):
        ident = annotation_id(placement.index)
        annotations.append(
            CommentAnnotation(
                marker=CommentMarker(
                    annotation_id=ident,
                    rect=placement.icon_rect,
                    text=comment_text(issue),
                    kind=issue.kind,
                ),
                popup=CommentPopup(annotation_id=ident, rect=placement.popup_rect),
            )
        )
    return annotations


class ReportComposer:
    """
    Orchestrates extraction, validation, review and report generation.

    Attributes:
        analyzer: Model used for text extraction and issue detection.
        validator: Dictionary validator (disabled when no dictionary).
        writer: Document writer for the report.
        config: Review configuration.

    Example:
        >>> composer = ReportComposer.from_config(ReviewConfig(model=ModelConfig.from_env()))
        >>> session = composer.process(Path("scan.png").read_bytes(), "scan.png")
        >>> while not session.is_complete:
        ...     session.accept()
        >>> report = composer.build_report()
        >>> report.filename
        'scan_OCR_Interactive_Report.pdf'
    """

    def __init__(
        self,
        analyzer: AnalysisService,
        dictionary: DictionaryService | None = None,
        writer: DocumentWriter | None = None,
        config: ReviewConfig | None = None,
    ):
        self.config = config or ReviewConfig()
        self.analyzer = analyzer
        self.validator = DictionaryValidator(dictionary)
        self.writer = writer or PdfDocumentWriter(author=self.config.comment_author)

        self._session: ReviewSession | None = None
        self._analysis: AnalysisResult | None = None
        self._image_bytes: bytes | None = None
        self._image_name: str | None = None

    @classmethod
    def from_config(cls, config: ReviewConfig) -> ReportComposer:
        """
        Build a composer with the HTTP model client and pyspellchecker dictionary.

        A dictionary that fails to load leaves the composer in AI-only mode.
        """
        return cls(
            analyzer=ChatCompletionsAnalyzer(config.model),
            dictionary=load_dictionary(config.dictionary),
            config=config,
        )

    @property
    def dictionary_enabled(self) -> bool:
        return self.validator.is_enabled

    @property
    def session(self) -> ReviewSession | None:
        """Review session for the current document, if any."""
        return self._session

    @property
    def analysis(self) -> AnalysisResult | None:
        return self._analysis

    @property
    def extracted_text(self) -> str:
        return self._analysis.extracted_text if self._analysis else ""

    def process(self, image_bytes: bytes, filename: str) -> ReviewSession:
        """
        Extract, validate and merge issues for an image, starting a new review.

        Args:
            image_bytes: The uploaded image.
            filename: Original file name, used to name the report.

        Returns:
            The new ReviewSession.

        Raises:
            AnalysisError: If the image is unreadable or the model call fails.
        """
        self.reset()

        logger.info("Extracting text and detecting errors with %s", self.config.model.model)
        analysis = analyze_image(self.analyzer, image_bytes, self.config.model.model)

        dictionary_issues = self.validator.validate(analysis.extracted_text)
        logger.info("Dictionary check found %d issues", len(dictionary_issues))

        merged = merge_issues(analysis.issues, dictionary_issues)
        logger.info("%d issue(s) found", len(merged))

        self._analysis = analysis
        self._image_bytes = image_bytes
        self._image_name = filename
        self._session = ReviewSession(merged)
        return self._session

    def build_report(self) -> ReportOutput:
        """
        Generate the report for the completed review.

        The writer is called even when nothing was accepted.

        Returns:
            ReportOutput with the PDF bytes and file name.

        Raises:
            SessionIncomplete: If no document was processed or the review
                is not finished.
            DocumentGenerationFailed: If the report cannot be produced.
        """
        session = self._session
        if session is None or self._image_bytes is None:
            raise SessionIncomplete("no document has been processed")
        if not session.is_complete:
            reviewed, total = session.progress()
            raise SessionIncomplete(f"review not finished ({reviewed}/{total} issues reviewed)")

        page_size = self.config.page_size
        width, height = read_image_size(self._image_bytes)
        layout = compute_image_layout(width, height, *page_size)

        accepted = session.accepted
        placements = compute_placements(layout, len(accepted), page_size)
        annotations = build_comment_annotations(accepted, placements)

        result = self.writer.write(self._image_bytes, layout, annotations, page_size)

        return ReportOutput(
            filename=report_filename(self._image_name or "", self.config.report_suffix),
            data=result.data,
            annotations_written=result.annotations_written,
            annotations_skipped=result.annotations_skipped,
        )

    def reset(self) -> None:
        """Discard the current document and its review."""
        self._session = None
        self._analysis = None
        self._image_bytes = None
        self._image_name = None
