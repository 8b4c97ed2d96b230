"""
logpattern command line.

Usage:
    logpattern validate patterns.json
    logpattern parse patterns.json input.log results.jsonl
    logpattern parse patterns.json input.log results.db --workers 4
"""

import argparse
import logging
import sys
from itertools import islice
from pathlib import Path

from config import LOG_FORMAT, LOG_LEVEL, PARSE_WORKERS
from ingestor.handlers.base import PatternFileError
from ingestor.handlers.raw import RawHandler
from ingestor.patternfile import load_pattern_file
from normalize import to_record
from patterns import Matcher, validate
from storage.factory import backend_for_path

logger = logging.getLogger("logpattern")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNREADABLE = 2

BATCH_SIZE = 1000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logpattern", description="Tool for parsing unstructured data")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="validates pattern file")
    p_validate.add_argument("pattern_file", type=Path, help="The pattern file to be validated")

    p_parse = sub.add_parser("parse", help="parses a file based on predefined patterns")
    p_parse.add_argument("pattern_file", type=Path, help="The pattern file which contains predefined patterns")
    p_parse.add_argument("input_file", type=Path, help="The input file to be parsed")
    p_parse.add_argument("output_file", type=Path, help="The output file where the results are written")
    p_parse.add_argument(
        "--workers", type=int, default=PARSE_WORKERS, help="Threads used for matching (default: %(default)s)"
    )
    return parser


def handle_validate(args) -> int:
    try:
        repository, diagnostics = load_pattern_file(args.pattern_file)
    except PatternFileError as e:
        logger.error("Cannot load %s: %s", args.pattern_file, e.reason)
        return EXIT_UNREADABLE

    report = validate(repository, diagnostics)
    for d in report.diagnostics:
        logger.error("Invalid pattern record: %s", d)
    for outcome in report.failures:
        pattern = repository[outcome.pattern_uuid]
        logger.error(
            "Test message #%d of %s (%s) failed: %s expected=%s actual=%s",
            outcome.test_index,
            pattern.name,
            pattern.uuid,
            outcome.outcome.value,
            dict(outcome.expected),
            dict(outcome.actual) if outcome.actual is not None else None,
        )

    logger.info(
        "Validated %d patterns: %d test messages, %d failed, %d diagnostics",
        len(repository),
        len(report.outcomes),
        len(report.failures),
        len(report.diagnostics),
    )
    return EXIT_OK if report.ok else EXIT_FAILED


def handle_parse(args) -> int:
    try:
        repository, diagnostics = load_pattern_file(args.pattern_file)
    except PatternFileError as e:
        logger.error("Cannot load %s: %s", args.pattern_file, e.reason)
        return EXIT_FAILED
    for d in diagnostics:
        logger.warning("Skipping pattern record: %s", d)

    matcher = Matcher(repository)
    reader = RawHandler()
    matched = total = 0
    try:
        with backend_for_path(str(args.output_file)) as sink:
            numbered = reader.iter_lines(str(args.input_file))
            for chunk in iter(lambda: list(islice(numbered, BATCH_SIZE)), []):
                results = matcher.match_lines([line for _, line in chunk], workers=args.workers)
                records = [to_record(n, line, r) for (n, line), r in zip(chunk, results)]
                sink.write_batch(records)
                total += len(records)
                matched += sum(1 for r in results if r is not None)
    except OSError as e:
        logger.error("Parse failed: %s", e)
        return EXIT_FAILED

    logger.info("Parsed %d lines from %s: %d matched, %d unmatched", total, args.input_file, matched, total - matched)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL, format=LOG_FORMAT)

    if args.command == "validate":
        return handle_validate(args)
    return handle_parse(args)


if __name__ == "__main__":
    sys.exit(main())
