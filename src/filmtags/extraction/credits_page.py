"""Probes for the full credits page (``/title/tt.../fullcredits``).

Two layouts are understood. The classic one renders every department as a
``<table>`` following a heading whose ``id`` names the department, with the
cast in ``table.cast_list``. The current one renders departments as
``section[data-testid=sub-section-<department>]`` lists.
"""

from __future__ import annotations

from bs4.element import Tag

from filmtags.config import ExtractionContext
from filmtags.extraction.document import (
    find_all_by_class,
    find_first_by_class,
    find_first_by_testid,
    first_text,
    next_sibling_matching,
    parse_document,
)
from filmtags.extraction.outcomes import ProbeResult
from filmtags.models import Actor

_NAME_LINK_CLASS = "name-credits--title-text-big"
_SUMMARY_ITEM_CLASS = "ipc-metadata-list-summary-item"


class CreditsPage:
    def __init__(self, root: Tag, context: ExtractionContext, *, source: str = "<memory>") -> None:
        self._root = root
        self._context = context
        self._source = source
        self._log = context.logger

    @classmethod
    def from_bytes(cls, payload: bytes, context: ExtractionContext, *, source: str = "<memory>") -> "CreditsPage":
        return cls(parse_document(payload, source=source), context, source=source)

    def actors(self) -> ProbeResult[list[Actor]]:
        table = find_first_by_class(self._root, "cast_list", "table")
        if table is not None:
            return self._actors_from_table(table)
        section = find_first_by_testid(self._root, "sub-section-cast")
        if section is not None:
            return self._actors_from_section(section)
        return ProbeResult.not_found("No cast table found")

    def directors(self) -> ProbeResult[list[str]]:
        return self._names("director")

    def writers(self) -> ProbeResult[list[str]]:
        return self._names("writer")

    def producers(self) -> ProbeResult[list[str]]:
        return self._names("producer")

    def _actors_from_table(self, table: Tag) -> ProbeResult[list[Actor]]:
        actors: list[Actor] = []
        photo_cells = find_all_by_class(table, "primary_photo", "td")
        for row_number, photo_cell in enumerate(photo_cells, start=1):
            actor_cell = next_sibling_matching(photo_cell, "td")
            if actor_cell is None:
                self._log.warning("Cast table row %d: no actor column found", row_number)
                continue
            name = self._link_text(actor_cell)
            if not name:
                self._log.warning("Cast table row %d: could not extract actor's name", row_number)
                continue
            character_cell = next_sibling_matching(actor_cell, "td", class_="character")
            character = first_text(character_cell)
            actors.append(Actor(name, character))
        if not actors:
            return ProbeResult.malformed("No actors found in cast table")
        return ProbeResult.ok(actors)

    def _actors_from_section(self, section: Tag) -> ProbeResult[list[Actor]]:
        actors: list[Actor] = []
        rows = find_all_by_class(section, _SUMMARY_ITEM_CLASS, "li")
        for row_number, row in enumerate(rows, start=1):
            name = first_text(find_first_by_class(row, _NAME_LINK_CLASS))
            if not name:
                self._log.warning("Cast list row %d: could not extract actor's name", row_number)
                continue
            character_link = row.find("a", href=lambda href: bool(href) and "/characters/" in href)
            character = first_text(character_link if isinstance(character_link, Tag) else None)
            actors.append(Actor(name, character))
        if not actors:
            return ProbeResult.malformed("No actors found in cast list")
        return ProbeResult.ok(actors)

    def _names(self, department: str) -> ProbeResult[list[str]]:
        cells = self._name_cells(department)
        if cells is None:
            return ProbeResult.not_found(f"Found no heading with id {department!r}")
        names: list[str] = []
        for row_number, cell in enumerate(cells, start=1):
            name = self._link_text(cell)
            if not name:
                self._log.warning("Row %d of table %r: no name found", row_number, department)
                continue
            if name not in names:
                names.append(name)
        if not names:
            return ProbeResult.malformed(f"No names found for {department!r}")
        return ProbeResult.ok(names)

    def _name_cells(self, department: str) -> list[Tag] | None:
        heading = self._root.find(id=department)
        if isinstance(heading, Tag):
            table = heading.find_next_sibling(True)
            if not isinstance(table, Tag) or table.name != "table":
                return None
            return find_all_by_class(table, "name", "td")

        section = find_first_by_testid(self._root, f"sub-section-{department}")
        if section is None:
            return None
        return find_all_by_class(section, _SUMMARY_ITEM_CLASS, "li")

    def _link_text(self, cell: Tag) -> str:
        link = find_first_by_class(cell, _NAME_LINK_CLASS) or cell.find("a")
        return first_text(link if isinstance(link, Tag) else None)
