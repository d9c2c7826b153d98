"""Record builder: runs the probe passes and merges their results into one record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

from filmtags.config import ExtractionContext
from filmtags.errors import DocumentParseError, PageUnavailableError
from filmtags.extraction.credits_page import CreditsPage
from filmtags.extraction.document import parse_document
from filmtags.extraction.keywords_page import KeywordsPage
from filmtags.extraction.outcomes import Probe, ProbeOutcome
from filmtags.extraction.structured import StructuredDataPage
from filmtags.extraction.title_page import TitlePage
from filmtags.fetch import PageFetcher
from filmtags.models import MovieRecord
from filmtags.urls import TitleTarget


class Fetcher(Protocol):
    def fetch(self, url: str) -> bytes:
        """Return the page body or raise ``PageUnavailableError``."""


@dataclass(frozen=True, slots=True)
class FieldBinding:
    """A record field and the probe whose successful result is written to it."""

    field: str
    probe: Probe


def title_bindings(page: TitlePage | StructuredDataPage) -> list[FieldBinding]:
    return [
        FieldBinding("actors", page.actors),
        FieldBinding("date_released", page.date_released),
        FieldBinding("directors", page.directors),
        FieldBinding("genres", page.genres),
        FieldBinding("keywords", page.keywords),
        FieldBinding("synopses", page.synopses),
        FieldBinding("titles", page.titles),
        FieldBinding("writers", page.writers),
        FieldBinding("countries", page.countries),
    ]


def credits_bindings(page: CreditsPage) -> list[FieldBinding]:
    return [
        FieldBinding("actors", page.actors),
        FieldBinding("directors", page.directors),
        FieldBinding("producers", page.producers),
        FieldBinding("writers", page.writers),
    ]


def keywords_bindings(page: KeywordsPage) -> list[FieldBinding]:
    return [FieldBinding("keywords", page.keywords)]


class RecordBuilder:
    """Build a frozen ``MovieRecord`` for one title.

    The title page pass is mandatory and its fetch/parse errors propagate.
    Full credits and keyword passes are optional; their failures are logged
    and the record built so far is kept.
    """

    def __init__(
        self,
        context: ExtractionContext,
        fetcher: Fetcher | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._context = context
        self._log = context.logger
        self._fetcher = fetcher or PageFetcher(
            languages=context.languages,
            user_agent=context.user_agent,
            timeout_seconds=context.timeout_seconds,
            max_retries=context.max_retries,
        )
        self._clock = clock

    def build(self, target: TitleTarget) -> MovieRecord:
        record = MovieRecord()
        self._title_pass(target, record)

        if self._context.use_full_credits:
            self._optional_pass("fullcredits", target.credits_url, record, self._credits_page)
        if self._context.use_keywords:
            self._optional_pass("keywords", target.keywords_url, record, self._keywords_page)

        record.set_field("imdb", target.title_id)
        record.set_field("date_tagged", self._clock().date().isoformat())
        return record.freeze()

    def _title_pass(self, target: TitleTarget, record: MovieRecord) -> None:
        url = target.title_url
        self._log.debug("Scraping title page %s", url)
        root = parse_document(self._fetcher.fetch(url), source=url)
        page: TitlePage | StructuredDataPage
        if self._context.use_structured_data:
            page = StructuredDataPage(root, self._context, source=url)
        else:
            page = TitlePage(root, self._context, source=url)
        page.require_primary_content()
        self._apply("title", title_bindings(page), record)

    def _optional_pass(
        self,
        name: str,
        url: str,
        record: MovieRecord,
        page_bindings: Callable[[bytes, str], list[FieldBinding]],
    ) -> None:
        self._log.debug("Scraping %s page %s", name, url)
        try:
            bindings = page_bindings(self._fetcher.fetch(url), url)
        except (PageUnavailableError, DocumentParseError) as exc:
            self._log.error("Could not scrape %s page: %s", name, exc)
            return
        self._apply(name, bindings, record)

    def _credits_page(self, payload: bytes, url: str) -> list[FieldBinding]:
        return credits_bindings(CreditsPage.from_bytes(payload, self._context, source=url))

    def _keywords_page(self, payload: bytes, url: str) -> list[FieldBinding]:
        return keywords_bindings(KeywordsPage.from_bytes(payload, self._context, source=url))

    def _apply(self, pass_name: str, bindings: list[FieldBinding], record: MovieRecord) -> int:
        applied = 0
        for binding in bindings:
            try:
                result = binding.probe()
                if result.found:
                    record.set_field(binding.field, result.value)
                    applied += 1
                    continue
            except Exception:
                self._log.exception("%s pass: probe for %r failed unexpectedly", pass_name, binding.field)
                continue

            if result.outcome is ProbeOutcome.MALFORMED:
                self._log.warning("%s pass: %s malformed: %s", pass_name, binding.field, result.reason)
            else:
                self._log.info("%s pass: %s not found: %s", pass_name, binding.field, result.reason)

        self._log.debug("%s pass: set %d of %d fields", pass_name, applied, len(bindings))
        return applied


def build_record(
    target: TitleTarget,
    context: ExtractionContext,
    fetcher: Fetcher | None = None,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> MovieRecord:
    """Convenience wrapper around ``RecordBuilder(...).build(target)``."""

    return RecordBuilder(context, fetcher, clock=clock).build(target)
