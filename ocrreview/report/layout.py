"""
Page layout for the report document.

The source image is drawn at the top-left of the page, shrunk to fit and
leaving a gutter on its right. Comment icons stack down that gutter, one
per accepted correction, each with a popup panel to its left.

All coordinates are PDF user space: origin bottom-left, y grows upwards.
"""

from __future__ import annotations

from ocrreview.models import AnnotationPlacement, ImageLayout, Rect

# =============================================================================
# CONSTANTS
# =============================================================================

MARGIN = 50
SIDE_GUTTER = 100  # Horizontal room kept free right of the image for icons
VERTICAL_RESERVE = 150
TOP_OFFSET = 120  # Distance from page top to image top

ICON_SIZE = 18
ICON_GAP = 20  # Between image right edge and icon column
ICON_STRIDE = 50  # Vertical distance between consecutive icons

# Icon origin clamp
ICON_MIN_X = 20
ICON_RIGHT_PAD = 5
ICON_MIN_Y = 50
ICON_TOP_PAD = 50

# Popup rect relative to the icon origin
POPUP_LEFT = 310
POPUP_RIGHT = 10
POPUP_BELOW = 80
POPUP_ABOVE = 20


# =============================================================================
# IMAGE LAYOUT
# =============================================================================


def compute_image_layout(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
) -> ImageLayout:
    """
    Place the image on the page, shrinking it to fit if needed.

    The image is limited to `page_width - 2*MARGIN - SIDE_GUTTER` wide and
    `page_height - VERTICAL_RESERVE` high. Width is fitted first, then
    height; the aspect ratio is kept and the image is never enlarged.

    Raises:
        ValueError: If any dimension is non-positive or the page leaves no
            room for the image.

    Example:
        >>> compute_image_layout(1000, 500, 595.28, 841.89)
        ImageLayout(x=50, y=524.25, width=395.28, height=197.64)
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"image size must be positive, got {image_width}x{image_height}")

    available_width = page_width - MARGIN * 2 - SIDE_GUTTER
    available_height = page_height - VERTICAL_RESERVE
    if available_width <= 0 or available_height <= 0:
        raise ValueError(f"page {page_width}x{page_height} leaves no room for the image")

    aspect_ratio = image_width / image_height
    width, height = float(image_width), float(image_height)

    if width > available_width:
        width = available_width
        height = width / aspect_ratio
    if height > available_height:
        height = available_height
        width = height * aspect_ratio

    return ImageLayout(
        x=MARGIN,
        y=page_height - height - TOP_OFFSET,
        width=width,
        height=height,
    )


# =============================================================================
# ANNOTATION PLACEMENT
# =============================================================================


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def fit_rect(rect: Rect, page_width: float, page_height: float) -> Rect:
    """
    Move `rect` inside the page, shrinking it only if it is larger than the page.
    """
    dx = 0.0
    if rect.x0 < 0:
        dx = -rect.x0
    elif rect.x1 > page_width:
        dx = page_width - rect.x1
    dy = 0.0
    if rect.y0 < 0:
        dy = -rect.y0
    elif rect.y1 > page_height:
        dy = page_height - rect.y1

    return Rect(
        x0=max(rect.x0 + dx, 0),
        y0=max(rect.y0 + dy, 0),
        x1=min(rect.x1 + dx, page_width),
        y1=min(rect.y1 + dy, page_height),
    )


def compute_annotation_placement(
    image_layout: ImageLayout,
    index: int,
    page_size: tuple[float, float],
) -> AnnotationPlacement:
    """
    Compute icon and popup rects for the `index`-th accepted correction.

    Icons sit right of the image, starting one stride below its top and moving
    down by ICON_STRIDE per correction. The icon origin is clamped to
    x in [20, page_width - 23] and y in [50, page_height - 50]; the popup
    is then shifted as needed to stay on the page.

    Raises:
        ValueError: If index is negative.

    Example:
        >>> layout = compute_image_layout(1000, 500, 595.28, 841.89)
        >>> compute_annotation_placement(layout, 0, (595.28, 841.89)).icon_rect
        Rect(x0=465.28, y0=671.89, x1=483.28, y1=689.89)
    """
    if index < 0:
        raise ValueError(f"index must be >= 0, got {index}")

    page_width, page_height = page_size

    x = image_layout.x + image_layout.width + ICON_GAP
    y = image_layout.y + image_layout.height - index * ICON_STRIDE - ICON_STRIDE

    safe_x = _clamp(x, ICON_MIN_X, page_width - ICON_SIZE - ICON_RIGHT_PAD)
    safe_y = _clamp(y, ICON_MIN_Y, page_height - ICON_TOP_PAD)

    icon_rect = Rect(safe_x, safe_y, safe_x + ICON_SIZE, safe_y + ICON_SIZE)
    popup_rect = Rect(
        safe_x - POPUP_LEFT,
        safe_y - POPUP_BELOW,
        safe_x - POPUP_RIGHT,
        safe_y + POPUP_ABOVE,
    )

    return AnnotationPlacement(
        icon_rect=fit_rect(icon_rect, page_width, page_height),
        popup_rect=fit_rect(popup_rect, page_width, page_height),
        index=index,
    )


def compute_placements(
    image_layout: ImageLayout,
    count: int,
    page_size: tuple[float, float],
) -> list[AnnotationPlacement]:
    """Placements for `count` accepted corrections, in order."""
    return [compute_annotation_placement(image_layout, i, page_size) for i in range(count)]
