"""Probes for the plot keyword page (``/title/tt.../keywords``)."""

from __future__ import annotations

from bs4.element import Tag

from filmtags.config import ExtractionContext
from filmtags.extraction.document import find_all_by_testid, find_first_by_class, first_text, parse_document
from filmtags.extraction.outcomes import ProbeResult
from filmtags.extraction.text import limit_items
from filmtags.models import LocalizedText

_KEYWORD_LINK_CLASS = "ipc-metadata-list-summary-item__t"


class KeywordsPage:
    def __init__(self, root: Tag, context: ExtractionContext, *, source: str = "<memory>") -> None:
        self._root = root
        self._context = context
        self._source = source
        self._log = context.logger

    @classmethod
    def from_bytes(cls, payload: bytes, context: ExtractionContext, *, source: str = "<memory>") -> "KeywordsPage":
        return cls(parse_document(payload, source=source), context, source=source)

    def keyword_names(self) -> ProbeResult[list[str]]:
        """All keywords in page order, skipping rows without text."""

        rows = find_all_by_testid(self._root, "list-summary-item", "li")
        if not rows:
            return ProbeResult.not_found("No keywords found on keyword page")

        names: list[str] = []
        for position, row in enumerate(rows, start=1):
            link = find_first_by_class(row, _KEYWORD_LINK_CLASS)
            if link is None:
                self._log.error("No keyword node found for element %d in keyword list", position)
                continue
            name = first_text(link)
            if not name:
                self._log.error("Empty keyword text found for element %d in keyword list", position)
                continue
            names.append(name)

        if not names:
            return ProbeResult.malformed(f"None of {len(rows)} keyword rows held text")
        self._log.debug("Keyword page: scraped %d keywords", len(names))
        return ProbeResult.ok(names)

    def keywords(self) -> ProbeResult[list[LocalizedText]]:
        names = self.keyword_names()
        if not names.found:
            return ProbeResult(names.outcome, None, names.reason)
        # keywords are only published in English
        language = self._context.default_locale.language
        kept = limit_items(names.value or [], self._context.keyword_limit)
        return ProbeResult.ok([LocalizedText(name, language) for name in kept])
