"""
Pytest configuration and fixtures for OCRReview tests.
"""

import io
import json

import pytest
from PIL import Image

from ocrreview.models import Issue, IssueKind, IssueSource
from ocrreview.ocr.analysis import AnalysisService
from ocrreview.ocr.dictionary import DictionaryService


class FakeDictionary(DictionaryService):
    """Dictionary with a fixed vocabulary and fixed suggestions."""

    def __init__(self, known=(), suggestions=None):
        self.known = {w.lower() for w in known}
        self.suggestions = suggestions or {}
        self.checked = []

    def check(self, word):
        self.checked.append(word)
        return word.lower() in self.known

    def suggest(self, word):
        return list(self.suggestions.get(word.lower(), []))


class FakeAnalyzer(AnalysisService):
    """Analyzer returning a canned response and recording calls."""

    def __init__(self, response):
        self.response = response
        self.calls = []

    def analyze(self, image_data_url, instruction, model):
        self.calls.append((image_data_url, instruction, model))
        return self.response


def make_image_bytes(fmt="PNG", size=(400, 200), mode="RGB", color=(240, 240, 240)):
    """Encode a blank image in `fmt`."""
    img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def model_response(text, issues=()):
    """JSON body in the shape the model is asked to return."""
    return json.dumps({"extracted_text": text, "issues": list(issues)})


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")


@pytest.fixture
def fake_dictionary():
    """Knows common words; suggests 'receive' for 'recieve'."""
    return FakeDictionary(
        known=["please", "the", "parcel", "total", "and", "weight", "receive"],
        suggestions={"recieve": ["receive", "relieve"], "parcell": ["parcel"]},
    )


@pytest.fixture
def spelling_issue():
    return Issue(
        kind=IssueKind.SPELLING,
        original="recieve",
        suggested="receive",
        description="i before e",
        source=IssueSource.MODEL,
    )


@pytest.fixture
def decimal_issue():
    return Issue(
        kind=IssueKind.DECIMAL,
        original="1,5",
        suggested="1.5",
        description="decimal comma should be decimal point",
        source=IssueSource.MODEL,
    )
