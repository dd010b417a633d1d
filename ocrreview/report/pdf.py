"""
PDF report generation with PyMuPDF.

The report is a single page holding the source image and one sticky-note
comment per accepted correction. Each comment is a Text annotation (the
clickable icon) linked to a Popup annotation (the text panel). Both carry
the same annotation id in their /NM entry, so the pair stays identifiable
if annotations are later reordered or filtered.

Layout rects arrive in PDF user space (origin bottom-left) and are
flipped to PyMuPDF's top-left coordinates here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

import fitz

from ocrreview.config import A4_PAGE_SIZE
from ocrreview.exceptions import AnnotationConstructionFailed, DocumentGenerationFailed
from ocrreview.imaging import IMAGE_ERRORS, image_size, open_image, to_jpeg_bytes, to_png_bytes
from ocrreview.models import CommentAnnotation, ImageLayout, IssueKind, Rect

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

PDF_JPEG_QUALITY = 90
COMMENT_ICON = "Comment"
DEFAULT_AUTHOR = "OCR Checker"

# Stroke colours per issue kind (RGB, 0-1)
KIND_COLORS = {
    IssueKind.SPELLING: (1.0, 0.8, 0.0),
    IssueKind.DECIMAL: (0.0, 0.8, 1.0),
}


def kind_color(kind: IssueKind) -> tuple[float, float, float]:
    """Spelling comments are amber; everything else is blue."""
    return KIND_COLORS.get(kind, KIND_COLORS[IssueKind.DECIMAL])


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class WriteResult:
    """Output of a document writer."""

    data: bytes
    annotations_written: int = 0
    annotations_skipped: int = 0


# =============================================================================
# IMAGE PREPARATION
# =============================================================================


def read_image_size(image_bytes: bytes) -> tuple[int, int]:
    """
    Return (width, height) in pixels.

    Raises:
        DocumentGenerationFailed: If the bytes are not a readable image.
    """
    try:
        return image_size(image_bytes)
    except IMAGE_ERRORS as e:
        raise DocumentGenerationFailed(f"Failed to load image: {e}") from e


def image_encodings(image_bytes: bytes) -> list[tuple[str, bytes]]:
    """
    Encodings to try when embedding the image, in order: JPEG, then PNG.

    The JPEG is flattened onto a white background. An encoding that
    cannot be produced is left out.

    Raises:
        DocumentGenerationFailed: If the bytes are not a readable image.
    """
    encodings = []
    try:
        with open_image(image_bytes) as img:
            img.load()
            for name, encode in (
                ("JPEG", lambda im: to_jpeg_bytes(im, PDF_JPEG_QUALITY)),
                ("PNG", to_png_bytes),
            ):
                try:
                    encodings.append((name, encode(img)))
                except (OSError, ValueError) as e:
                    logger.warning("%s encoding failed: %s", name, e)
    except IMAGE_ERRORS as e:
        raise DocumentGenerationFailed(f"Failed to load image: {e}") from e
    return encodings


# =============================================================================
# WRITERS
# =============================================================================


class DocumentWriter(ABC):
    """Abstract report document writer."""

    @abstractmethod
    def write(
        self,
        image_bytes: bytes,
        image_layout: ImageLayout,
        annotations: Sequence[CommentAnnotation],
        page_size: tuple[float, float] = A4_PAGE_SIZE,
    ) -> WriteResult:
        """
        Produce a one-page document with the image and comment annotations.

        Raises:
            DocumentGenerationFailed: If no document can be produced.
        """
        pass


class PdfDocumentWriter(DocumentWriter):
    """
    Writes the report as an interactive PDF using PyMuPDF.

    Attributes:
        author: Author shown on every comment.

    Example:
        >>> writer = PdfDocumentWriter()
        >>> result = writer.write(image_bytes, layout, annotations)
        >>> Path("report.pdf").write_bytes(result.data)
    """

    def __init__(self, author: str = DEFAULT_AUTHOR):
        self.author = author

    @staticmethod
    def to_fitz_rect(rect: Rect, page_height: float) -> fitz.Rect:
        """Flip a bottom-left-origin rect into PyMuPDF page coordinates."""
        return fitz.Rect(rect.x0, page_height - rect.y1, rect.x1, page_height - rect.y0)

    def _insert_image(self, page: fitz.Page, image_bytes: bytes, target: fitz.Rect) -> str:
        errors = []
        for name, data in image_encodings(image_bytes):
            try:
                page.insert_image(target, stream=data, keep_proportion=False)
                return name
            except Exception as e:
                logger.warning("%s embedding failed, trying next encoding: %s", name, e)
                errors.append(f"{name}: {e}")
        detail = f" ({'; '.join(errors)})" if errors else ""
        raise DocumentGenerationFailed(f"image could not be embedded as JPEG or PNG{detail}")

    def _add_comment(
        self,
        doc: fitz.Document,
        page: fitz.Page,
        comment: CommentAnnotation,
        page_height: float,
    ) -> None:
        marker_rect = self.to_fitz_rect(comment.marker.rect, page_height)
        popup_rect = self.to_fitz_rect(comment.popup.rect, page_height)

        annot = None
        try:
            annot = page.add_text_annot(marker_rect.tl, comment.marker.text, icon=COMMENT_ICON)
            annot.set_info(
                content=comment.marker.text,
                title=self.author,
                modDate=fitz.get_pdf_now(),
            )
            annot.set_colors(stroke=kind_color(comment.marker.kind))
            annot.set_rect(marker_rect)
            annot.set_popup(popup_rect)
            annot.set_open(comment.popup.open)
            annot.update()

            annot_id = fitz.get_pdf_str(comment.annotation_id)
            doc.xref_set_key(annot.xref, "NM", annot_id)
            if annot.popup_xref:
                doc.xref_set_key(annot.popup_xref, "NM", annot_id)

            # /Open on the marker as well as the popup
            doc.xref_set_key(annot.xref, "Open", "true" if comment.popup.open else "false")
        except Exception as e:
            if annot is not None:
                try:
                    page.delete_annot(annot)
                except Exception as cleanup_error:
                    logger.debug("Could not remove partial annotation: %s", cleanup_error)
            raise AnnotationConstructionFailed(f"comment {comment.annotation_id}: {e}") from e

    def write(
        self,
        image_bytes: bytes,
        image_layout: ImageLayout,
        annotations: Sequence[CommentAnnotation],
        page_size: tuple[float, float] = A4_PAGE_SIZE,
    ) -> WriteResult:
        page_width, page_height = page_size
        doc = fitz.open()
        try:
            page = doc.new_page(width=page_width, height=page_height)

            encoding = self._insert_image(
                page, image_bytes, self.to_fitz_rect(image_layout.rect, page_height)
            )
            logger.debug("Embedded image as %s", encoding)

            written = skipped = 0
            for comment in annotations:
                try:
                    self._add_comment(doc, page, comment, page_height)
                    written += 1
                except AnnotationConstructionFailed as e:
                    skipped += 1
                    logger.warning("Failed to create annotation: %s", e)

            try:
                data = doc.tobytes(garbage=3, deflate=True)
            except Exception as e:
                raise DocumentGenerationFailed(f"PDF creation failed: {e}") from e
        finally:
            doc.close()

        logger.info("PDF written: %d comments (%d skipped)", written, skipped)
        return WriteResult(data=data, annotations_written=written, annotations_skipped=skipped)
