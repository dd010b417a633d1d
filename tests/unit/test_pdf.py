"""
Unit tests for PDF report writing (ocrreview/report/pdf.py).

Reads the generated documents back with PyMuPDF.
"""

import fitz
import pytest
from conftest import make_image_bytes

from ocrreview.config import A4_PAGE_SIZE
from ocrreview.exceptions import AnnotationConstructionFailed, DocumentGenerationFailed
from ocrreview.models import (
    CommentAnnotation,
    CommentMarker,
    CommentPopup,
    IssueKind,
    Rect,
)
from ocrreview.report.layout import compute_image_layout, compute_placements
from ocrreview.report.pdf import (
    KIND_COLORS,
    PdfDocumentWriter,
    image_encodings,
    read_image_size,
)

PAGE_W, PAGE_H = A4_PAGE_SIZE


def make_annotations(kinds):
    layout = compute_image_layout(400, 200, PAGE_W, PAGE_H)
    placements = compute_placements(layout, len(kinds), A4_PAGE_SIZE)
    annotations = []
    for i, (kind, placement) in enumerate(zip(kinds, placements)):
        ident = f"ocr-comment-{i + 1:04d}"
        annotations.append(
            CommentAnnotation(
                marker=CommentMarker(
                    ident, placement.icon_rect, f"Changed (a{i}) into (b{i})", kind
                ),
                popup=CommentPopup(ident, placement.popup_rect),
            )
        )
    return layout, annotations


def text_annots(data):
    doc = fitz.open(stream=data, filetype="pdf")
    page = doc[0]
    return doc, page, list(page.annots(types=[fitz.PDF_ANNOT_TEXT]))


# =============================================================================
# Writer Tests
# =============================================================================


class TestPdfDocumentWriter:
    """Tests for PdfDocumentWriter."""

    @pytest.fixture
    def writer(self):
        return PdfDocumentWriter()

    def test_single_page_with_image(self, writer, png_bytes):
        layout, _ = make_annotations([])
        result = writer.write(png_bytes, layout, [])

        doc = fitz.open(stream=result.data, filetype="pdf")
        assert doc.page_count == 1
        page = doc[0]
        assert page.rect.width == pytest.approx(PAGE_W, abs=0.01)
        assert page.rect.height == pytest.approx(PAGE_H, abs=0.01)
        assert len(page.get_images()) == 1
        assert result.annotations_written == 0
        assert result.annotations_skipped == 0
        doc.close()

    def test_image_placed_from_top(self, writer, png_bytes):
        layout, _ = make_annotations([])
        result = writer.write(png_bytes, layout, [])

        doc = fitz.open(stream=result.data, filetype="pdf")
        page = doc[0]
        xref = page.get_images()[0][0]
        bbox = page.get_image_rects(xref)[0]
        # 120pt from the page top, 50pt from the left
        assert bbox.x0 == pytest.approx(50, abs=0.5)
        assert bbox.y0 == pytest.approx(120, abs=0.5)
        assert bbox.width == pytest.approx(layout.width, abs=0.5)
        doc.close()

    def test_one_comment_per_annotation(self, writer, png_bytes):
        layout, annotations = make_annotations([IssueKind.SPELLING, IssueKind.DECIMAL])
        result = writer.write(png_bytes, layout, annotations)

        doc, _, annots = text_annots(result.data)
        assert result.annotations_written == 2
        assert len(annots) == 2
        contents = sorted(a.info["content"] for a in annots)
        assert contents == ["Changed (a0) into (b0)", "Changed (a1) into (b1)"]
        doc.close()

    def test_comment_metadata(self, writer, png_bytes):
        layout, annotations = make_annotations([IssueKind.SPELLING])
        result = writer.write(png_bytes, layout, annotations)

        doc, _, (annot,) = text_annots(result.data)
        assert annot.info["title"] == "OCR Checker"
        assert annot.info["id"] == "ocr-comment-0001"
        stroke = tuple(annot.colors["stroke"])
        assert stroke == pytest.approx(KIND_COLORS[IssueKind.SPELLING], abs=0.01)
        assert not annot.is_open
        doc.close()

    def test_popup_linked_with_same_id(self, writer, png_bytes):
        layout, annotations = make_annotations([IssueKind.DECIMAL])
        result = writer.write(png_bytes, layout, annotations)

        doc, _, (annot,) = text_annots(result.data)
        assert annot.popup_xref > 0
        kind, value = doc.xref_get_key(annot.popup_xref, "NM")
        assert kind == "string"
        assert value == "ocr-comment-0001"
        doc.close()

    def test_icon_position_flipped(self, writer, png_bytes):
        layout, annotations = make_annotations([IssueKind.SPELLING])
        result = writer.write(png_bytes, layout, annotations)

        doc, _, (annot,) = text_annots(result.data)
        icon = annotations[0].marker.rect
        assert annot.rect.x0 == pytest.approx(icon.x0, abs=0.5)
        assert annot.rect.y0 == pytest.approx(PAGE_H - icon.y1, abs=0.5)
        assert annot.rect.x1 == pytest.approx(icon.x1, abs=0.5)
        assert annot.rect.y1 == pytest.approx(PAGE_H - icon.y0, abs=0.5)
        assert annot.rect.width == pytest.approx(18, abs=0.5)

        popup = annotations[0].popup.rect
        expected = PdfDocumentWriter.to_fitz_rect(popup, PAGE_H)
        assert tuple(annot.popup_rect) == pytest.approx(tuple(expected), abs=0.5)
        doc.close()

    def test_marker_and_popup_closed(self, writer, png_bytes):
        layout, annotations = make_annotations([IssueKind.SPELLING])
        result = writer.write(png_bytes, layout, annotations)

        doc, _, (annot,) = text_annots(result.data)
        assert doc.xref_get_key(annot.xref, "Open") == ("bool", "false")
        assert doc.xref_get_key(annot.popup_xref, "Open") == ("bool", "false")
        doc.close()

    def test_custom_author(self, png_bytes):
        layout, annotations = make_annotations([IssueKind.SPELLING])
        result = PdfDocumentWriter(author="Reviewer").write(png_bytes, layout, annotations)

        doc, _, (annot,) = text_annots(result.data)
        assert annot.info["title"] == "Reviewer"
        doc.close()

    def test_failed_annotation_skipped(self, png_bytes, monkeypatch):
        layout, annotations = make_annotations([IssueKind.SPELLING] * 3)
        original = PdfDocumentWriter._add_comment

        def flaky(self, doc, page, comment, page_height):
            if comment.annotation_id == "ocr-comment-0002":
                raise AnnotationConstructionFailed("boom")
            return original(self, doc, page, comment, page_height)

        monkeypatch.setattr(PdfDocumentWriter, "_add_comment", flaky)
        result = PdfDocumentWriter().write(png_bytes, layout, annotations)

        doc, _, annots = text_annots(result.data)
        assert result.annotations_written == 2
        assert result.annotations_skipped == 1
        assert sorted(a.info["id"] for a in annots) == ["ocr-comment-0001", "ocr-comment-0003"]
        doc.close()

    def test_native_annotation_error_skips_one(self, writer, png_bytes, monkeypatch):
        """A MuPDF error while adding one comment leaves the others in place."""
        layout, annotations = make_annotations([IssueKind.SPELLING] * 3)
        original = fitz.Page.add_text_annot
        calls = []

        def fail_second(self, point, text, *args, **kwargs):
            calls.append(text)
            if len(calls) == 2:
                raise fitz.mupdf.FzErrorFormat("cannot create annotation")
            return original(self, point, text, *args, **kwargs)

        monkeypatch.setattr(fitz.Page, "add_text_annot", fail_second)
        result = writer.write(png_bytes, layout, annotations)

        doc, _, annots = text_annots(result.data)
        assert result.annotations_written == 2
        assert result.annotations_skipped == 1
        assert sorted(a.info["id"] for a in annots) == ["ocr-comment-0001", "ocr-comment-0003"]
        doc.close()

    def test_partial_annotation_removed(self, writer, png_bytes, monkeypatch):
        """A comment whose popup fails is removed rather than left half-built."""
        layout, annotations = make_annotations([IssueKind.DECIMAL])

        def broken_popup(self, rect):
            raise fitz.mupdf.FzErrorFormat("bad popup")

        monkeypatch.setattr(fitz.Annot, "set_popup", broken_popup)
        result = writer.write(png_bytes, layout, annotations)

        doc, _, annots = text_annots(result.data)
        assert result.annotations_skipped == 1
        assert annots == []
        doc.close()

    def test_png_fallback_when_jpeg_rejected(self, writer, png_bytes, monkeypatch):
        original = fitz.Page.insert_image

        def reject_first(self, rect, *args, stream=None, **kwargs):
            if stream is not None and stream[:2] == b"\xff\xd8":
                raise fitz.mupdf.FzErrorFormat("unsupported JPEG")
            return original(self, rect, *args, stream=stream, **kwargs)

        monkeypatch.setattr(fitz.Page, "insert_image", reject_first)
        layout, _ = make_annotations([])
        result = writer.write(png_bytes, layout, [])

        doc = fitz.open(stream=result.data, filetype="pdf")
        assert len(doc[0].get_images()) == 1
        doc.close()

    def test_all_encodings_rejected(self, writer, png_bytes, monkeypatch):
        def reject(self, rect, *args, **kwargs):
            raise fitz.mupdf.FzErrorFormat("cannot recognize image")

        monkeypatch.setattr(fitz.Page, "insert_image", reject)
        layout, _ = make_annotations([])

        with pytest.raises(DocumentGenerationFailed, match="JPEG or PNG"):
            writer.write(png_bytes, layout, [])

    def test_unreadable_image(self, writer):
        layout, _ = make_annotations([])
        with pytest.raises(DocumentGenerationFailed):
            writer.write(b"definitely not an image", layout, [])

    def test_to_fitz_rect(self):
        rect = PdfDocumentWriter.to_fitz_rect(Rect(10, 700, 28, 718), PAGE_H)
        assert rect.x0 == 10
        assert rect.x1 == 28
        assert rect.y0 == pytest.approx(PAGE_H - 718)
        assert rect.y1 == pytest.approx(PAGE_H - 700)


# =============================================================================
# Image Preparation Tests
# =============================================================================


class TestImagePreparation:
    def test_read_image_size(self):
        assert read_image_size(make_image_bytes(size=(321, 123))) == (321, 123)

    def test_read_image_size_invalid(self):
        with pytest.raises(DocumentGenerationFailed):
            read_image_size(b"nope")

    def test_encodings_jpeg_then_png(self, png_bytes):
        names = [name for name, _ in image_encodings(png_bytes)]
        assert names == ["JPEG", "PNG"]

    def test_transparent_image_flattened(self):
        rgba = make_image_bytes("PNG", mode="RGBA", color=(0, 0, 0, 0))
        (name, data), _ = image_encodings(rgba)
        assert name == "JPEG"
        assert data[:2] == b"\xff\xd8"
