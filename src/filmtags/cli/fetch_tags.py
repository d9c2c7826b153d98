"""CLI command that scrapes one title and writes its Matroska tag document."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys
from typing import BinaryIO

from dotenv import load_dotenv

from filmtags.builder import Fetcher, build_record
from filmtags.config import ScraperSettings
from filmtags.errors import DocumentParseError, PageUnavailableError
from filmtags.models import MovieRecord
from filmtags.tags.serializer import write_tags
from filmtags.urls import TitleTarget

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name!r}")
    logging.basicConfig(format=LOG_FORMAT, level=level, stream=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape film metadata and emit Matroska tags XML")
    parser.add_argument("target", help="Title id (tt0000000), imdb://tt0000000 or title page URL")
    parser.add_argument("-o", "--output", help="Write XML to this file instead of stdout")
    parser.add_argument("--lang", help="Colon-separated preferred locales, e.g. en-US:de-DE")
    parser.add_argument(
        "--opts",
        default="",
        help="Scraper options, e.g. jsonld=true:fullcredits=true:keywords=true:keyword-limit=10",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: FILMTAGS_LOG_LEVEL or WARNING)",
    )
    return parser


def _write(record: MovieRecord, output: str | None, stdout: BinaryIO) -> None:
    if output is None:
        write_tags(record, stdout)
        return
    with Path(output).open("wb") as handle:
        write_tags(record, handle)


def main(argv: list[str] | None = None, *, fetcher: Fetcher | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        _configure_logging(args.log_level or os.environ.get("FILMTAGS_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        target = TitleTarget.parse(args.target)
        settings = ScraperSettings.from_env()
        if args.lang:
            settings = settings.with_languages(args.lang)
        settings = settings.apply_options(args.opts)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logger = logging.getLogger("filmtags")
    try:
        record = build_record(target, settings.to_context(logger), fetcher)
    except (PageUnavailableError, DocumentParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        _write(record, args.output, sys.stdout.buffer)
    except OSError as exc:
        print(f"error: could not write tags: {exc}", file=sys.stderr)
        return 1

    logger.info("Wrote tags for %s", target.title_id)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
