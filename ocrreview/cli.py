"""
Terminal review of OCR corrections.

Usage:
    ocrreview scan.png
    ocrreview scan.png --model gpt-4o --output-dir reports/
    ocrreview scan.png --yes-all --no-dictionary

Requires OPENAI_API_KEY (and optionally OPENAI_BASE_URL) in the environment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from ocrreview.config import DictionaryConfig, ModelConfig, ReviewConfig
from ocrreview.exceptions import AnalysisError, ConfigurationError, DocumentGenerationFailed
from ocrreview.models import Issue
from ocrreview.report.composer import ReportComposer
from ocrreview.review.session import ReviewSession

logger = logging.getLogger(__name__)


def format_issue(issue: Issue, number: int, total: int) -> str:
    lines = [
        f"[{number}/{total}] {issue.kind.value.upper()} ({issue.source.value})",
        f'  "{issue.original}" -> "{issue.suggested}"',
    ]
    if issue.description:
        lines.append(f"  {issue.description}")
    return "\n".join(lines)


def prompt_decision(issue: Issue, number: int, total: int) -> bool:
    """Ask the reviewer; True means accept."""
    print(format_issue(issue, number, total))
    while True:
        answer = input("  [a]ccept / [r]eject? ").strip().lower()
        if answer in ("a", "accept", "y", "yes"):
            return True
        if answer in ("r", "reject", "n", "no"):
            return False


def run_review(session: ReviewSession, decide: Callable[[Issue, int, int], bool]) -> int:
    """
    Drive a session to completion with `decide`.

    Returns:
        Number of accepted corrections.
    """
    total = len(session)
    while not session.is_complete:
        issue = session.current()
        if decide(issue, session.current_index + 1, total):
            session.accept()
        else:
            session.reject()
    return len(session.accepted)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocrreview",
        description="Extract text from an image, review corrections, export an annotated PDF.",
    )
    parser.add_argument("image", type=Path, help="Image to process")
    parser.add_argument(
        "--model", help="Model identifier (default: $OCRREVIEW_MODEL or gpt-4o-mini)"
    )
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Report directory")
    parser.add_argument("--language", default="en", help="Dictionary language")
    parser.add_argument(
        "--no-dictionary",
        action="store_true",
        help="Skip dictionary cross-validation (AI-only mode)",
    )
    parser.add_argument("--yes-all", action="store_true", help="Accept every issue")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ReviewConfig(
            model=ModelConfig.from_env(model=args.model),
            dictionary=DictionaryConfig(enabled=not args.no_dictionary, language=args.language),
        )
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        image_bytes = args.image.read_bytes()
    except OSError as e:
        print(f"Cannot read {args.image}: {e}", file=sys.stderr)
        return 1

    composer = ReportComposer.from_config(config)
    logger.debug("Dictionary validation enabled: %s", composer.dictionary_enabled)

    try:
        session = composer.process(image_bytes, args.image.name)
    except AnalysisError as e:
        print(f"Processing failed: {e}", file=sys.stderr)
        return 1

    print("Extracted text:")
    print(composer.extracted_text)
    print()

    if session.is_complete:
        print("No spelling or decimal issues found!")
    else:
        decide = (lambda *_: True) if args.yes_all else prompt_decision
        try:
            accepted = run_review(session, decide)
        except (EOFError, KeyboardInterrupt):
            print("\nReview abandoned; no report written.", file=sys.stderr)
            return 1
        print(f"Review complete! {accepted} correction(s) accepted.")

    try:
        report = composer.build_report()
    except DocumentGenerationFailed as e:
        print(f"PDF generation failed: {e}", file=sys.stderr)
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    path = report.save(args.output_dir)
    print(f"Interactive PDF written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
