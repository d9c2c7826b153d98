from __future__ import annotations

import logging

import pytest

from filmtags.config import ExtractionContext
from filmtags.extraction.keywords_page import KeywordsPage
from filmtags.extraction.outcomes import ProbeOutcome
from filmtags.locale import Locale


def _row(text: str) -> str:
    return (
        '<li data-testid="list-summary-item" class="ipc-metadata-list-summary-item">'
        f'<a class="ipc-metadata-list-summary-item__t" href="/search/keyword/">{text}</a>'
        "</li>"
    )


def _html(rows: list[str]) -> bytes:
    return f"<html><body><ul>{''.join(rows)}</ul></body></html>".encode("utf-8")


def _page(rows: list[str], keyword_limit: int = 0) -> KeywordsPage:
    context = ExtractionContext(
        languages=(Locale.parse("de-DE"),),
        default_locale=Locale.parse("en-US"),
        keyword_limit=keyword_limit,
        logger=logging.getLogger("filmtags.test"),
    )
    return KeywordsPage.from_bytes(_html(rows), context, source="test")


def test_keywords_keep_document_order_and_limit() -> None:
    rows = [_row(f"keyword {index:02d}") for index in range(50)]

    result = _page(rows, keyword_limit=10).keywords()

    assert [item.text for item in result.value or []] == [f"keyword {index:02d}" for index in range(10)]
    assert {item.language for item in result.value or []} == {"en"}


def test_zero_limit_keeps_every_keyword() -> None:
    rows = [_row(f"keyword {index}") for index in range(25)]

    assert len(_page(rows).keywords().value or []) == 25


def test_rows_without_text_are_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    rows = [_row("dream"), _row(" "), '<li data-testid="list-summary-item"></li>', _row("heist")]

    with caplog.at_level(logging.ERROR, logger="filmtags.test"):
        result = _page(rows).keyword_names()

    assert result.value == ["dream", "heist"]
    assert "element 2" in caplog.text
    assert "element 3" in caplog.text


def test_page_without_rows_is_not_found() -> None:
    assert _page([]).keywords().outcome is ProbeOutcome.NOT_FOUND


def test_page_with_only_empty_rows_is_malformed() -> None:
    assert _page([_row(" ")]).keywords().outcome is ProbeOutcome.MALFORMED
