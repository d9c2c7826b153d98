"""Structured-data probes: fields copied from the page's embedded JSON-LD payload."""

from __future__ import annotations

from functools import cached_property
import json
from typing import Any

from bs4.element import Tag

from filmtags.config import ExtractionContext
from filmtags.errors import DocumentParseError
from filmtags.extraction.document import parse_document
from filmtags.extraction.outcomes import ProbeResult, non_empty_list
from filmtags.extraction.text import clean_text, limit_items
from filmtags.models import Actor, Country, LocalizedText

JSON_LD_TYPE = "application/ld+json"
_KEYWORD_SEPARATOR = ","


def _things(value: Any) -> list[dict[str, Any]]:
    """Normalize a JSON-LD node reference (object or list of objects) to a list."""

    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _strings(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


def _names(things: list[dict[str, Any]]) -> list[str]:
    names: list[str] = []
    for thing in things:
        name = clean_text(thing.get("name"))
        if name:
            names.append(name)
    return names


class StructuredDataPage:
    """Decode the first JSON-LD block once and derive fields from it."""

    def __init__(self, root: Tag, context: ExtractionContext, *, source: str = "<memory>") -> None:
        self._root = root
        self._context = context
        self._source = source

    @classmethod
    def from_bytes(
        cls, payload: bytes, context: ExtractionContext, *, source: str = "<memory>"
    ) -> "StructuredDataPage":
        return cls(parse_document(payload, source=source), context, source=source)

    @cached_property
    def payload(self) -> dict[str, Any]:
        script = self._root.find("script", attrs={"type": JSON_LD_TYPE})
        if not isinstance(script, Tag):
            raise DocumentParseError(self._source, "No JSON-LD movie schema found")
        raw = script.string or script.get_text()
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DocumentParseError(self._source, f"JSON-LD payload is not valid JSON: {exc}") from exc
        things = _things(decoded)
        if not things:
            raise DocumentParseError(self._source, "JSON-LD payload is not an object")
        return things[0]

    def require_primary_content(self) -> None:
        """Decode the payload now so a missing schema fails the pass up front."""

        _ = self.payload

    def titles(self) -> ProbeResult[list[LocalizedText]]:
        name = clean_text(self.payload.get("name"))
        if not name:
            return ProbeResult.not_found("Schema has no name")
        return ProbeResult.ok([LocalizedText(name, self._context.default_locale.language)])

    def synopses(self) -> ProbeResult[list[LocalizedText]]:
        description = clean_text(self.payload.get("description"))
        if not description:
            return ProbeResult.not_found("Schema has no description")
        return ProbeResult.ok([LocalizedText(description, self._context.default_locale.language)])

    def genres(self) -> ProbeResult[list[LocalizedText]]:
        language = self._context.default_locale.language
        genres = [LocalizedText(text, language) for text in map(clean_text, _strings(self.payload.get("genre"))) if text]
        return non_empty_list(genres, "Schema has no genres")

    def keywords(self) -> ProbeResult[list[LocalizedText]]:
        raw = self.payload.get("keywords")
        if not isinstance(raw, str):
            return ProbeResult.not_found("Schema has no keywords")
        texts = [text for text in map(clean_text, raw.split(_KEYWORD_SEPARATOR)) if text]
        language = self._context.default_locale.language
        keywords = [LocalizedText(text, language) for text in limit_items(texts, self._context.keyword_limit)]
        return non_empty_list(keywords, "Schema keywords are empty")

    def actors(self) -> ProbeResult[list[Actor]]:
        return non_empty_list([Actor(name) for name in _names(_things(self.payload.get("actor")))], "Schema has no actors")

    def directors(self) -> ProbeResult[list[str]]:
        return non_empty_list(_names(_things(self.payload.get("director"))), "Schema has no directors")

    def writers(self) -> ProbeResult[list[str]]:
        creators = [thing for thing in _things(self.payload.get("creator")) if thing.get("@type") == "Person"]
        return non_empty_list(_names(creators), "Schema has no person creators")

    def date_released(self) -> ProbeResult[str]:
        published = clean_text(self.payload.get("datePublished"))
        if not published:
            return ProbeResult.not_found("Schema has no datePublished")
        return ProbeResult.ok(published)

    def countries(self) -> ProbeResult[list[Country]]:
        rating = clean_text(self.payload.get("contentRating"))
        if not rating:
            return ProbeResult.not_found("Schema has no contentRating")
        return ProbeResult.ok([Country(self._context.preferred_locale.alpha3, rating)])
