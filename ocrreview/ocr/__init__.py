"""
Text extraction and dictionary cross-validation.

- AnalysisService / ChatCompletionsAnalyzer: vision model extraction
- DictionaryService / SpellCheckerDictionary: local spell-check dictionary
- DictionaryValidator: spelling issues from the extracted text

Example:
    >>> from ocrreview.ocr import DictionaryValidator, SpellCheckerDictionary
    >>> validator = DictionaryValidator(SpellCheckerDictionary())
    >>> [i.suggested for i in validator.validate("Please recieve it")]
    ['receive']
"""

from ocrreview.ocr.analysis import (
    ANALYSIS_PROMPT,
    AnalysisService,
    ChatCompletionsAnalyzer,
    analyze_image,
    encode_image_for_model,
    extract_json_object,
    parse_analysis_response,
)
from ocrreview.ocr.dictionary import (
    DictionaryService,
    SpellCheckerDictionary,
    load_dictionary,
)
from ocrreview.ocr.validator import (
    SKIP_PATTERNS,
    DictionaryValidator,
    ValidationStats,
)

__all__ = [
    # Analysis
    "ANALYSIS_PROMPT",
    "AnalysisService",
    "ChatCompletionsAnalyzer",
    "analyze_image",
    "encode_image_for_model",
    "extract_json_object",
    "parse_analysis_response",
    # Dictionary
    "DictionaryService",
    "SpellCheckerDictionary",
    "load_dictionary",
    # Validation
    "DictionaryValidator",
    "ValidationStats",
    "SKIP_PATTERNS",
]
