#!/usr/bin/env python3
"""
Basic OCRReview Usage Example

This example demonstrates the core workflow:
1. Configure the model and dictionary
2. Extract text and detect issues in an image
3. Review each issue
4. Export the accepted corrections as an annotated PDF
"""

import sys
from pathlib import Path

from ocrreview import (
    DictionaryConfig,
    IssueKind,
    ModelConfig,
    ReportComposer,
    ReviewConfig,
)


def main(image_path: str):
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Configuration
    # ─────────────────────────────────────────────────────────────────────────

    config = ReviewConfig(
        model=ModelConfig.from_env(),  # OPENAI_API_KEY, OPENAI_BASE_URL
        dictionary=DictionaryConfig(
            language="en",
            additional_vocabulary={"OCRReview"},  # Never flag these
        ),
        comment_author="Example Reviewer",
    )
    composer = ReportComposer.from_config(config)
    print(f"Dictionary check enabled: {composer.dictionary_enabled}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Extraction and issue detection
    # ─────────────────────────────────────────────────────────────────────────

    path = Path(image_path)
    session = composer.process(path.read_bytes(), path.name)

    print("Extracted text:")
    print(composer.extracted_text)
    print(f"\n{len(session)} issue(s) to review")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Review: accept decimal fixes and dictionary-confirmed spellings
    # ─────────────────────────────────────────────────────────────────────────

    while not session.is_complete:
        issue = session.current()
        if issue.kind is IssueKind.DECIMAL or issue.position is not None:
            session.accept()
            print(f"  accepted: {issue.original} -> {issue.suggested}")
        else:
            session.reject()
            print(f"  rejected: {issue.original} -> {issue.suggested}")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Export
    # ─────────────────────────────────────────────────────────────────────────

    report = composer.build_report()
    saved = report.save(".")
    print(f"\nSaved {saved} with {report.annotations_written} comment(s)")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: basic_usage.py IMAGE")
        sys.exit(1)
    main(sys.argv[1])
