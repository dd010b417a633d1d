"""
Report generation: layout, PDF writing and the end-to-end composer.
"""

from ocrreview.report.composer import (
    ReportComposer,
    annotation_id,
    build_comment_annotations,
)
from ocrreview.report.layout import (
    compute_annotation_placement,
    compute_image_layout,
    compute_placements,
)
from ocrreview.report.pdf import DocumentWriter, PdfDocumentWriter, WriteResult
from ocrreview.report.text import comment_text, report_filename, sanitize_text_for_pdf

__all__ = [
    # Composer
    "ReportComposer",
    "annotation_id",
    "build_comment_annotations",
    # Layout
    "compute_image_layout",
    "compute_annotation_placement",
    "compute_placements",
    # Writers
    "DocumentWriter",
    "PdfDocumentWriter",
    "WriteResult",
    # Text
    "comment_text",
    "report_filename",
    "sanitize_text_for_pdf",
]
