"""
Data models for OCRReview.

Issues flow from the model and the dictionary into one merged, ordered
sequence; accepted issues become comment annotations on the report page.
Geometry types use PDF user space (origin at bottom-left, points).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ocrreview.exceptions import MalformedIssue


class IssueKind(Enum):
    """Kind of detected discrepancy."""

    SPELLING = "spelling"
    DECIMAL = "decimal"


class IssueSource(Enum):
    """Which detector produced an issue."""

    MODEL = "AI"
    DICTIONARY = "Dictionary"


@dataclass(frozen=True)
class Issue:
    """
    A detected discrepancy in the extracted text.

    `position` is the whitespace-token index in the extracted text. The
    dictionary always sets it; model issues usually don't.

    Example:
        >>> issue = Issue(IssueKind.SPELLING, "recieve", "receive", source=IssueSource.MODEL)
        >>> issue.dedup_key
        ('recieve', <IssueKind.SPELLING: 'spelling'>)
    """

    kind: IssueKind
    original: str
    suggested: str
    description: str = ""
    source: IssueSource = IssueSource.MODEL
    position: int | None = None

    def __post_init__(self) -> None:
        if not self.original:
            raise MalformedIssue("issue 'original' must be non-empty")
        if not self.suggested:
            raise MalformedIssue("issue 'suggested' must be non-empty")
        if self.position is not None and self.position < 0:
            raise MalformedIssue(f"issue position must be >= 0, got {self.position}")

    @property
    def dedup_key(self) -> tuple[str, IssueKind]:
        """Case-insensitive duplicate key shared across sources."""
        return (self.original.lower(), self.kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape used by the model response."""
        data: dict[str, Any] = {
            "type": self.kind.value,
            "original": self.original,
            "suggested": self.suggested,
            "description": self.description,
            "source": self.source.value,
        }
        if self.position is not None:
            data["position"] = self.position
        return data


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in PDF user space (x0 < x1, y0 < y1)."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    def as_list(self) -> list[float]:
        return [self.x0, self.y0, self.x1, self.y1]

    def within(self, width: float, height: float) -> bool:
        """True if the rect lies inside [0, width] x [0, height]."""
        return self.x0 >= 0 and self.y0 >= 0 and self.x1 <= width and self.y1 <= height


@dataclass(frozen=True)
class ImageLayout:
    """Where the source image is drawn on the report page."""

    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class AnnotationPlacement:
    """Icon and popup rectangles for the accepted correction at `index`."""

    icon_rect: Rect
    popup_rect: Rect
    index: int


@dataclass(frozen=True)
class CommentMarker:
    """The clickable icon half of a comment, linked to its popup by `annotation_id`."""

    annotation_id: str
    rect: Rect
    text: str
    kind: IssueKind


@dataclass(frozen=True)
class CommentPopup:
    """The text panel half of a comment, linked to its marker by `annotation_id`."""

    annotation_id: str
    rect: Rect
    open: bool = False


@dataclass(frozen=True)
class CommentAnnotation:
    """A marker/popup pair for one accepted correction."""

    marker: CommentMarker
    popup: CommentPopup

    def __post_init__(self) -> None:
        if self.marker.annotation_id != self.popup.annotation_id:
            raise ValueError(
                f"marker {self.marker.annotation_id!r} and popup "
                f"{self.popup.annotation_id!r} must share an annotation id"
            )

    @property
    def annotation_id(self) -> str:
        return self.marker.annotation_id


@dataclass
class AnalysisResult:
    """Extracted text and model-detected issues for one image."""

    extracted_text: str
    issues: list[Issue] = field(default_factory=list)
    raw_response: str = ""
    parsed: bool = True  # False when the raw response was used as text


@dataclass
class ReportOutput:
    """The generated report document."""

    filename: str
    data: bytes
    annotations_written: int = 0
    annotations_skipped: int = 0

    def save(self, directory: str | Path | None = None) -> str:
        """
        Write the report to `directory` (default: current directory).

        Returns:
            Path of the written file.
        """
        path = Path(directory or ".") / self.filename
        path.write_bytes(self.data)
        return str(path)
