"""Heuristic probes for title pages, keyed on stable ``data-testid`` markers."""

from __future__ import annotations

from datetime import datetime
from functools import cached_property
import re

from bs4.element import Tag

from filmtags.config import ExtractionContext
from filmtags.errors import DocumentParseError
from filmtags.extraction.document import (
    find_all_by_class,
    find_all_by_testid,
    find_first_by_class,
    find_first_by_testid,
    first_text,
    parse_document,
)
from filmtags.extraction.outcomes import ProbeResult, non_empty_list
from filmtags.extraction.roles import Role, resolve_role
from filmtags.extraction.text import limit_items
from filmtags.models import Actor, Country, LocalizedText

_TITLE_TEST_IDS = ("hero__pageTitle", "hero-title-block__title")
_SYNOPSIS_TEST_IDS = ("plot-xl", "plot-l", "plot")
_GENRE_TEST_IDS = ("genres", "interests")
_CHIP_CLASS = "ipc-chip__text"
_LABEL_CLASS = "ipc-metadata-list-item__label"
_CONTENT_ITEM_CLASS = "ipc-metadata-list-item__list-content-item"
_MORE_KEYWORDS_RE = re.compile(r"^\d+ more$")
_TRAILING_PAREN_RE = re.compile(r"\s*\([^)]*\)\s*$")
_RELEASE_DATE_FORMATS = ("%B %d, %Y", "%d %B %Y", "%B %Y")

CreditGroups = dict[Role, list[str]]


def normalize_release_date(text: str) -> str:
    """Turn "July 16, 2010 (United States)" into "2010-07-16"; unknown shapes pass through."""

    value = _TRAILING_PAREN_RE.sub("", text).strip()
    for pattern in _RELEASE_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, pattern)
        except ValueError:
            continue
        if pattern == "%B %Y":
            return parsed.strftime("%Y-%m")
        return parsed.date().isoformat()
    return value


class TitlePage:
    """Probes over the main title page (``/title/tt.../``)."""

    def __init__(self, root: Tag, context: ExtractionContext, *, source: str = "<memory>") -> None:
        self._root = root
        self._context = context
        self._source = source
        self._log = context.logger

    @classmethod
    def from_bytes(cls, payload: bytes, context: ExtractionContext, *, source: str = "<memory>") -> "TitlePage":
        return cls(parse_document(payload, source=source), context, source=source)

    def require_primary_content(self) -> None:
        """Raise when the page does not look like a title page at all."""

        result = self.titles()
        if not result.found:
            raise DocumentParseError(self._source, f"Title page has no title: {result.reason}")

    # -- single-region probes ------------------------------------------------

    def titles(self) -> ProbeResult[list[LocalizedText]]:
        text = self._text_by_testids(_TITLE_TEST_IDS)
        if not text:
            return ProbeResult.not_found("No title element found")
        return ProbeResult.ok([LocalizedText(text, self._context.preferred_locale.language)])

    def synopses(self) -> ProbeResult[list[LocalizedText]]:
        text = self._text_by_testids(_SYNOPSIS_TEST_IDS)
        if not text:
            return ProbeResult.not_found("No plot element found")
        return ProbeResult.ok([LocalizedText(text, self._context.default_locale.language)])

    def genres(self) -> ProbeResult[list[LocalizedText]]:
        container = self._first_by_testids(_GENRE_TEST_IDS)
        if container is None:
            return ProbeResult.not_found("No genre container found")
        language = self._context.default_locale.language
        genres = [LocalizedText(text, language) for text in self._chip_texts(container)]
        if not genres:
            return ProbeResult.malformed("Genre container holds no genre chips")
        return ProbeResult.ok(genres)

    def keywords(self) -> ProbeResult[list[LocalizedText]]:
        container = find_first_by_testid(self._root, "storyline-plot-keywords")
        if container is None:
            return ProbeResult.not_found("No keyword container found")
        texts = [text for text in self._chip_texts(container) if not _MORE_KEYWORDS_RE.match(text)]
        # keywords are only published in English
        language = self._context.default_locale.language
        keywords = [LocalizedText(text, language) for text in limit_items(texts, self._context.keyword_limit)]
        if not keywords:
            return ProbeResult.malformed("Keyword container holds no keywords")
        return ProbeResult.ok(keywords)

    def date_released(self) -> ProbeResult[str]:
        item = find_first_by_testid(self._root, "title-details-releasedate")
        if item is None:
            return ProbeResult.not_found("No release date element found")
        text = first_text(find_first_by_class(item, _CONTENT_ITEM_CLASS))
        if not text:
            return ProbeResult.malformed("Release date element holds no text")
        return ProbeResult.ok(normalize_release_date(text))

    def countries(self) -> ProbeResult[list[Country]]:
        item = find_first_by_testid(self._root, "storyline-certificate")
        if item is None:
            return ProbeResult.not_found("No certificate element found")
        content = find_first_by_class(item, _CONTENT_ITEM_CLASS) or item.find("ul")
        rating = first_text(content if isinstance(content, Tag) else None)
        if not rating:
            return ProbeResult.malformed("Certificate element holds no rating")
        return ProbeResult.ok([Country(self._context.preferred_locale.alpha3, rating)])

    # -- probes fed by the shared credits list -------------------------------

    @cached_property
    def credits(self) -> ProbeResult[CreditGroups]:
        """Principal credits grouped by canonical role, parsed once per page."""

        wide = find_first_by_testid(self._root, "title-pc-wide-screen")
        items = find_all_by_testid(wide or self._root, "title-pc-principal-credit")
        if not items:
            return ProbeResult.not_found("No principal credits found")

        groups: CreditGroups = {}
        for position, item in enumerate(items, start=1):
            label = first_text(find_first_by_class(item, _LABEL_CLASS))
            if not label:
                self._log.warning("Credits list: entry %d has no label", position)
                continue
            role = resolve_role(label)
            if role is Role.UNKNOWN:
                self._log.warning("Credits list: unknown label %r at entry %d, dropped", label, position)
                continue
            if role in groups:
                continue
            names = self._credit_names(item, label)
            if names:
                groups[role] = names
            else:
                self._log.error("Credits list: no usable entry for label %r", label)

        if not groups:
            return ProbeResult.malformed("Principal credits contain no recognized roles")
        return ProbeResult.ok(groups)

    def directors(self) -> ProbeResult[list[str]]:
        return self._names_for(Role.DIRECTOR)

    def writers(self) -> ProbeResult[list[str]]:
        return self._names_for(Role.WRITER)

    def actors(self) -> ProbeResult[list[Actor]]:
        rows = find_all_by_testid(self._root, "title-cast-item")
        if rows:
            return self._actors_from_cast(rows)
        stars = self._names_for(Role.ACTOR)
        if not stars.found:
            return ProbeResult(stars.outcome, None, stars.reason)
        return ProbeResult.ok([Actor(name) for name in stars.value or []])

    # -- helpers ---------------------------------------------------------------

    def _actors_from_cast(self, rows: list[Tag]) -> ProbeResult[list[Actor]]:
        actors: list[Actor] = []
        for position, row in enumerate(rows, start=1):
            name = first_text(find_first_by_testid(row, "title-cast-item__actor"))
            if not name:
                self._log.warning("Cast row %d: no actor name, row skipped", position)
                continue
            character = first_text(find_first_by_testid(row, "cast-item-characters-link"))
            actors.append(Actor(name, character))
        if not actors:
            return ProbeResult.malformed(f"None of {len(rows)} cast rows contained an actor name")
        return ProbeResult.ok(actors)

    def _names_for(self, role: Role) -> ProbeResult[list[str]]:
        credits = self.credits
        if not credits.found:
            return ProbeResult(credits.outcome, None, credits.reason)
        return non_empty_list(list((credits.value or {}).get(role, [])), f"No {role.value} credits listed")

    def _credit_names(self, item: Tag, label: str) -> list[str]:
        inner = item.find("ul")
        if not isinstance(inner, Tag):
            self._log.warning("Credits list: no inner list for label %r", label)
            return []
        names: list[str] = []
        for position, entry in enumerate(inner.find_all("li"), start=1):
            link = entry.find("a")
            name = first_text(link if isinstance(link, Tag) else entry)
            if not name:
                self._log.info("Credits list: no text at position %d for label %r", position, label)
                continue
            names.append(name)
        return names

    def _first_by_testids(self, test_ids: tuple[str, ...]) -> Tag | None:
        for test_id in test_ids:
            node = find_first_by_testid(self._root, test_id)
            if node is not None:
                return node
        return None

    def _text_by_testids(self, test_ids: tuple[str, ...]) -> str:
        for test_id in test_ids:
            text = first_text(find_first_by_testid(self._root, test_id))
            if text:
                return text
        return ""

    def _chip_texts(self, container: Tag) -> list[str]:
        texts: list[str] = []
        for chip in find_all_by_class(container, _CHIP_CLASS):
            text = first_text(chip)
            if text:
                texts.append(text)
        return texts
