"""
Text extraction and issue detection with a vision-language model.

The model gets the image and an instruction and returns text that should
contain a JSON object:

    {"extracted_text": "...", "issues": [{"type": ..., "original": ...}, ...]}

Responses are often wrapped in prose or code fences, so the first balanced
{...} block is extracted before decoding. When nothing usable comes back
the whole response is treated as the extracted text, with no issues.
"""

from __future__ import annotations

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import requests

from ocrreview.exceptions import AnalysisError, ModelResponseUnparseable
from ocrreview.imaging import IMAGE_ERRORS, open_image, to_jpeg_bytes
from ocrreview.issues.normalizer import normalize_issues
from ocrreview.models import AnalysisResult, IssueSource

if TYPE_CHECKING:
    from ocrreview.config import ModelConfig

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

ANALYSIS_PROMPT = """Extract ALL visible text (very very must be exact spelling as the image) from this image and analyze it for errors. Return a JSON response in this exact format:

{
"extracted_text": "the complete text exactly as it appears",
"issues": [
{
"type": "spelling",
"original": "misspelled word",
"suggested": "correct word",
"description": "explanation of the issue",
"source": "AI"
},
{
"type": "decimal",
"original": "1,5",
"suggested": "1.5",
"description": "decimal comma should be decimal point",
"source": "AI"
}
]
}

RULES:
1. Extract text exactly as written (preserve original formatting)
2. Find spelling mistakes and suggest corrections
3. Find decimal comma errors (like 1,5 should be 1.5) and convert to decimal points
4. Only return valid JSON, no other text
5. If no issues found, return empty issues array
6. Focus on obvious errors - don't be overly aggressive"""

# Formats vision models accept directly; anything else is converted to JPEG
MODEL_COMPATIBLE_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}
CONVERTED_JPEG_QUALITY = 95


# =============================================================================
# ANALYSIS SERVICE
# =============================================================================


class AnalysisService(ABC):
    """Abstract OCR/analysis model."""

    @abstractmethod
    def analyze(self, image_data_url: str, instruction: str, model: str) -> str:
        """
        Send one image and instruction, return the raw text response.

        Raises:
            AnalysisError: If the call fails.
        """
        pass


class ChatCompletionsAnalyzer(AnalysisService):
    """
    Analysis via an OpenAI-compatible /chat/completions endpoint.

    Example:
        >>> analyzer = ChatCompletionsAnalyzer(ModelConfig.from_env())
        >>> raw = analyzer.analyze(data_url, ANALYSIS_PROMPT, "gpt-4o-mini")
    """

    def __init__(self, config: ModelConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/chat/completions"

    def build_payload(self, image_data_url: str, instruction: str, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": instruction},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": image_data_url,
                                "detail": self.config.image_detail,
                            },
                        },
                    ],
                }
            ],
            "temperature": self.config.temperature,
        }

    def analyze(self, image_data_url: str, instruction: str, model: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(image_data_url, instruction, model)

        logger.debug("Model request: model=%s endpoint=%s", model, self.endpoint)
        try:
            response = self.session.post(
                self.endpoint,
                headers=headers,
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise AnalysisError(f"LLM API request failed: {e}") from e

        if not response.ok:
            raise AnalysisError(f"LLM API failed: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AnalysisError(f"LLM API returned an unexpected payload: {e}") from e

        if not isinstance(content, str):
            raise AnalysisError("LLM API returned no text content")

        logger.debug("Model response: %d chars", len(content))
        return content


# =============================================================================
# IMAGE ENCODING
# =============================================================================


def encode_image_for_model(image_bytes: bytes) -> str:
    """
    Encode image bytes as a data URL the model accepts.

    JPEG, PNG and WEBP pass through unchanged. Other formats (BMP, GIF,
    TIFF, ...) are flattened onto a white background and re-encoded as JPEG.

    Raises:
        AnalysisError: If the bytes are not a readable image.
    """
    try:
        with open_image(image_bytes) as img:
            fmt = img.format
            if fmt in MODEL_COMPATIBLE_FORMATS:
                mime = MODEL_COMPATIBLE_FORMATS[fmt]
                data = image_bytes
            else:
                logger.info("Converting %s to JPEG for model compatibility", fmt)
                data = to_jpeg_bytes(img, CONVERTED_JPEG_QUALITY)
                mime = "image/jpeg"
    except IMAGE_ERRORS as e:
        raise AnalysisError(f"Failed to read image: {e}") from e

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


# =============================================================================
# RESPONSE PARSING
# =============================================================================


def extract_json_object(text: str) -> str | None:
    """
    Return the first balanced {...} block in `text`, or None.

    Braces inside JSON strings are ignored.

    Example:
        >>> extract_json_object('Here you go: {"a": "}"} thanks')
        '{"a": "}"}'
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def parse_analysis_response(raw: str) -> AnalysisResult:
    """
    Parse a model response into extracted text and normalized issues.

    Args:
        raw: Raw model response.

    Returns:
        AnalysisResult with parsed=True.

    Raises:
        ModelResponseUnparseable: If no JSON object with a non-empty
            `extracted_text` string can be found.
    """
    block = extract_json_object(raw)
    if block is None:
        raise ModelResponseUnparseable("No valid JSON found in AI response")

    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise ModelResponseUnparseable(f"Invalid JSON in AI response: {e}") from e

    if not isinstance(data, dict):
        raise ModelResponseUnparseable("AI response JSON is not an object")

    text = data.get("extracted_text")
    if not isinstance(text, str) or not text:
        raise ModelResponseUnparseable("No extracted text found in AI response")

    raw_issues = data.get("issues")
    if not isinstance(raw_issues, list):
        if raw_issues is not None:
            logger.warning("Ignoring non-array 'issues' in AI response")
        raw_issues = []

    return AnalysisResult(
        extracted_text=text,
        issues=normalize_issues(raw_issues, IssueSource.MODEL),
        raw_response=raw,
        parsed=True,
    )


def analyze_image(
    service: AnalysisService,
    image_bytes: bytes,
    model: str,
    instruction: str = ANALYSIS_PROMPT,
) -> AnalysisResult:
    """
    Run the model on an image and parse the result.

    Unparseable responses fall back to the raw text with no issues.

    Raises:
        AnalysisError: If the image cannot be read or the model call fails.
    """
    data_url = encode_image_for_model(image_bytes)
    raw = service.analyze(data_url, instruction, model)

    try:
        result = parse_analysis_response(raw)
    except ModelResponseUnparseable as e:
        logger.warning("Failed to parse AI response, using fallback: %s", e)
        return AnalysisResult(
            extracted_text=raw.strip(),
            issues=[],
            raw_response=raw,
            parsed=False,
        )

    logger.info(
        "Model extracted %d chars with %d issues",
        len(result.extracted_text),
        len(result.issues),
    )
    return result
