"""
Text helpers for the report document.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from ocrreview.models import Issue

REPORT_SUFFIX = "_OCR_Interactive_Report"
REPORT_EXTENSION = ".pdf"

# Replacements for characters outside printable ASCII
PDF_CHAR_MAP = {
    "→": "->",
    "←": "<-",
    "↑": "^",
    "↓": "v",
    "✓": "OK",
    "✗": "X",
    "•": "*",
    "–": "-",
    "—": "--",
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    "…": "...",
    "©": "(c)",
    "®": "(R)",
    "™": "(TM)",
    "°": "deg",
    "±": "+/-",
    "≈": "~=",
    "≤": "<=",
    "≥": ">=",
    "≠": "!=",
    "×": "x",
    "÷": "/",
}

MAPPED_CHARS_PATTERN = re.compile("[" + "".join(PDF_CHAR_MAP) + "]")
NON_PRINTABLE_PATTERN = re.compile(r"[^\x20-\x7E]")


def sanitize_text_for_pdf(text: str | None) -> str:
    """
    Reduce text to printable ASCII.

    Known symbols get ASCII spellings; anything else becomes "?".

    Example:
        >>> sanitize_text_for_pdf("1,5 → 1.5 °C")
        '1,5 -> 1.5 degC'
    """
    if not text:
        return ""
    text = MAPPED_CHARS_PATTERN.sub(lambda m: PDF_CHAR_MAP[m.group(0)], text)
    return NON_PRINTABLE_PATTERN.sub("?", text)


def comment_text(issue: Issue) -> str:
    """Comment shown for an accepted correction."""
    return sanitize_text_for_pdf(f"Changed ({issue.original}) into ({issue.suggested})")


def report_filename(image_name: str, suffix: str = REPORT_SUFFIX) -> str:
    """
    Report file name for an uploaded image.

    Drops the last extension (if any) and directory parts.

    Example:
        >>> report_filename("scans/receipt.2024.jpg")
        'receipt.2024_OCR_Interactive_Report.pdf'
    """
    name = PurePath(image_name).name or image_name
    stem = name[: name.rfind(".")] if "." in name else name
    if not stem:
        stem = name
    return f"{stem}{suffix}{REPORT_EXTENSION}"
