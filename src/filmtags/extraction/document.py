"""Document parser and tree queries shared by all page probes."""

from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from filmtags.errors import DocumentParseError
from filmtags.extraction.text import normalize_whitespace

TEST_ID_ATTR = "data-testid"


def parse_document(payload: bytes, *, source: str = "<memory>") -> BeautifulSoup:
    """Parse an HTML payload into a navigable tree."""

    if not payload or not payload.strip():
        raise DocumentParseError(source, "Document is empty")
    try:
        soup = BeautifulSoup(payload, "lxml")
    except Exception as exc:  # pragma: no cover - parser backend failures
        raise DocumentParseError(source, f"Could not parse document: {exc}") from exc
    if soup.find(True) is None:
        raise DocumentParseError(source, "Document contains no elements")
    return soup


def find_first_by_testid(root: Tag, test_id: str, name: str | None = None) -> Tag | None:
    found = root.find(name, attrs={TEST_ID_ATTR: test_id})
    return found if isinstance(found, Tag) else None


def find_all_by_testid(root: Tag, test_id: str, name: str | None = None) -> list[Tag]:
    return [node for node in root.find_all(name, attrs={TEST_ID_ATTR: test_id}) if isinstance(node, Tag)]


def find_first_by_class(root: Tag, class_name: str, name: str | None = None) -> Tag | None:
    found = root.find(name, class_=class_name)
    return found if isinstance(found, Tag) else None


def find_all_by_class(root: Tag, class_name: str, name: str | None = None) -> list[Tag]:
    return [node for node in root.find_all(name, class_=class_name) if isinstance(node, Tag)]


def first_text(node: Tag | None) -> str:
    """Return the first non-blank text descendant of ``node``, normalized."""

    if node is None:
        return ""
    for text in node.strings:
        cleaned = normalize_whitespace(str(text))
        if cleaned:
            return cleaned
    return ""


def next_sibling_matching(node: Tag, name: str, **attrs: Any) -> Tag | None:
    found = node.find_next_sibling(name, **attrs)
    return found if isinstance(found, Tag) else None
