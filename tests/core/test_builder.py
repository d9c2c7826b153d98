from __future__ import annotations

from datetime import datetime
from io import BytesIO
import json
import logging

import pytest
from lxml import etree

from filmtags.builder import RecordBuilder, build_record
from filmtags.config import ExtractionContext
from filmtags.errors import DocumentParseError, PageUnavailableError
from filmtags.extraction.title_page import TitlePage
from filmtags.locale import Locale
from filmtags.models import Actor, LocalizedText
from filmtags.tags.serializer import write_tags
from filmtags.urls import TitleTarget

_TARGET = TitleTarget.parse("tt1375666")

_TITLE_HTML = """
<html><body>
  <h1 data-testid="hero__pageTitle"><span>Inception</span></h1>
  <div data-testid="title-pc-wide-screen"><ul>
    <li data-testid="title-pc-principal-credit">
      <span class="ipc-metadata-list-item__label">{director_label}</span>
      <ul><li><a href="/name/nm0634240/">C. Nolan</a></li></ul>
    </li>
  </ul></div>
  {extra}
</body></html>
"""

_CAST_ROWS = """
  <div data-testid="title-cast-item"><a data-testid="title-cast-item__actor">Leonardo DiCaprio</a></div>
  <div data-testid="title-cast-item"><a data-testid="title-cast-item__actor"></a></div>
  <div data-testid="title-cast-item"><a data-testid="title-cast-item__actor">Elliot Page</a></div>
"""


def _title_html(director_label: str = "Director", extra: str = "") -> bytes:
    return _TITLE_HTML.format(director_label=director_label, extra=extra).encode("utf-8")


def _keywords_html(count: int) -> bytes:
    rows = "".join(
        '<li data-testid="list-summary-item">'
        f'<a class="ipc-metadata-list-summary-item__t">keyword {index:02d}</a></li>'
        for index in range(count)
    )
    return f"<html><body><ul>{rows}</ul></body></html>".encode("utf-8")


class _FakeFetcher:
    def __init__(self, pages: dict[str, object]) -> None:
        self._pages = pages
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        page = self._pages.get(url)
        if page is None:
            raise PageUnavailableError(url, "HTTP response: 404 Not Found")
        if isinstance(page, Exception):
            raise page
        return page  # type: ignore[return-value]


def _context(**overrides: object) -> ExtractionContext:
    values: dict[str, object] = {
        "languages": (Locale.parse("en-US"),),
        "logger": logging.getLogger("filmtags.test"),
    }
    values.update(overrides)
    return ExtractionContext(**values)  # type: ignore[arg-type]


def _clock() -> datetime:
    return datetime(2024, 5, 1, 12, 30)


def _tags(record) -> list[tuple[str, str]]:
    sink = BytesIO()
    write_tags(record, sink)
    root = etree.fromstring(sink.getvalue())
    return [(simple.findtext("Name"), simple.findtext("String")) for simple in root.findall("Tag/Simple")]


def test_title_and_director_without_keyword_section() -> None:
    fetcher = _FakeFetcher({_TARGET.title_url: _title_html()})

    record = build_record(_TARGET, _context(), fetcher, clock=_clock)

    tags = _tags(record)
    assert [value for name, value in tags if name == "TITLE"] == ["Inception"]
    assert [value for name, value in tags if name == "DIRECTOR"] == ["C. Nolan"]
    assert not [name for name, _ in tags if name in {"KEYWORDS", "GENRE"}]
    assert ("IMDB", "tt1375666") in tags
    assert ("DATE_TAGGED", "2024-05-01") in tags
    assert record.frozen
    assert fetcher.calls == [_TARGET.title_url]


def test_cast_row_without_name_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    fetcher = _FakeFetcher({_TARGET.title_url: _title_html(extra=_CAST_ROWS)})

    with caplog.at_level(logging.WARNING, logger="filmtags.test"):
        record = build_record(_TARGET, _context(), fetcher, clock=_clock)

    assert record.actors == [Actor("Leonardo DiCaprio"), Actor("Elliot Page")]
    assert [name for name, _ in _tags(record)].count("ACTOR") == 2
    assert "Cast row 2" in caplog.text


def test_keyword_limit_keeps_first_entries_in_document_order() -> None:
    fetcher = _FakeFetcher(
        {
            _TARGET.title_url: _title_html(),
            _TARGET.keywords_url: _keywords_html(50),
        }
    )

    record = build_record(_TARGET, _context(use_keywords=True, keyword_limit=10), fetcher, clock=_clock)

    assert [value for name, value in _tags(record) if name == "KEYWORDS"] == [
        f"keyword {index:02d}" for index in range(10)
    ]


def test_mandatory_fetch_failure_raises_and_writes_nothing() -> None:
    fetcher = _FakeFetcher({_TARGET.title_url: PageUnavailableError(_TARGET.title_url, "connection refused")})
    sink = BytesIO()

    with pytest.raises(PageUnavailableError, match="connection refused"):
        write_tags(build_record(_TARGET, _context(), fetcher, clock=_clock), sink)

    assert sink.getvalue() == b""


def test_title_page_without_title_is_a_parse_error() -> None:
    fetcher = _FakeFetcher({_TARGET.title_url: b"<html><body><p>Sign in</p></body></html>"})

    with pytest.raises(DocumentParseError, match="no title"):
        build_record(_TARGET, _context(), fetcher, clock=_clock)


def test_empty_genres_emit_no_genre_tag() -> None:
    html = _title_html(extra='<div data-testid="genres"></div>')
    record = build_record(_TARGET, _context(), _FakeFetcher({_TARGET.title_url: html}), clock=_clock)

    assert record.genres == []
    assert "GENRE" not in [name for name, _ in _tags(record)]


def test_optional_page_failures_keep_partial_record(caplog: pytest.LogCaptureFixture) -> None:
    fetcher = _FakeFetcher(
        {
            _TARGET.title_url: _title_html(),
            _TARGET.credits_url: b"   ",
        }
    )
    context = _context(use_full_credits=True, use_keywords=True)

    with caplog.at_level(logging.ERROR, logger="filmtags.test"):
        record = build_record(_TARGET, context, fetcher, clock=_clock)

    assert record.directors == ["C. Nolan"]
    assert record.keywords == []
    assert fetcher.calls == [_TARGET.title_url, _TARGET.credits_url, _TARGET.keywords_url]
    assert "Could not scrape fullcredits page" in caplog.text
    assert "Could not scrape keywords page" in caplog.text


def test_full_credits_pass_overrides_title_credits_and_adds_producers() -> None:
    credits_html = b"""
    <html><body>
      <h4 id="director">Directed by</h4>
      <table><tr><td class="name"><a>Christopher Nolan</a></td></tr></table>
      <h4 id="producer">Produced by</h4>
      <table><tr><td class="name"><a>Emma Thomas</a></td></tr></table>
    </body></html>
    """
    fetcher = _FakeFetcher({_TARGET.title_url: _title_html(), _TARGET.credits_url: credits_html})

    record = build_record(_TARGET, _context(use_full_credits=True), fetcher, clock=_clock)

    assert record.directors == ["Christopher Nolan"]
    assert record.producers == ["Emma Thomas"]


@pytest.mark.parametrize("label", ["Director", "Directors", "DIRECTOR:", "Regie"])
def test_director_label_variants_produce_director_tag(label: str) -> None:
    fetcher = _FakeFetcher({_TARGET.title_url: _title_html(director_label=label)})

    record = build_record(_TARGET, _context(), fetcher, clock=_clock)

    assert [value for name, value in _tags(record) if name == "DIRECTOR"] == ["C. Nolan"]


def test_structured_data_mode_reads_json_ld() -> None:
    schema = {"@type": "Movie", "name": "Inception", "genre": ["Action"], "director": {"name": "C. Nolan"}}
    html = f'<html><head><script type="application/ld+json">{json.dumps(schema)}</script></head></html>'
    fetcher = _FakeFetcher({_TARGET.title_url: html.encode("utf-8")})

    record = RecordBuilder(_context(use_structured_data=True), fetcher, clock=_clock).build(_TARGET)

    assert record.titles == [LocalizedText("Inception", "en")]
    assert record.genres == [LocalizedText("Action", "en")]
    assert record.directors == ["C. Nolan"]


def test_json_ld_control_escapes_survive_to_output() -> None:
    payload = '{"@type": "Movie", "name": "Inception", "description": "Dream\\u0008 heist"}'
    html = f'<html><head><script type="application/ld+json">{payload}</script></head></html>'
    fetcher = _FakeFetcher({_TARGET.title_url: html.encode("utf-8")})

    record = build_record(_TARGET, _context(use_structured_data=True), fetcher, clock=_clock)

    assert record.synopses == [LocalizedText("Dream\x08 heist", "en")]
    assert ("SYNOPSIS", "Dream� heist") in _tags(record)


def test_crashing_probe_does_not_stop_the_pass(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def _broken_genres(self: TitlePage) -> None:
        raise AttributeError("markup changed")

    monkeypatch.setattr(TitlePage, "genres", _broken_genres)
    fetcher = _FakeFetcher({_TARGET.title_url: _title_html(extra=_CAST_ROWS)})

    with caplog.at_level(logging.ERROR, logger="filmtags.test"):
        record = build_record(_TARGET, _context(), fetcher, clock=_clock)

    assert record.genres == []
    assert record.titles == [LocalizedText("Inception", "en")]
    assert record.directors == ["C. Nolan"]
    assert record.actors == [Actor("Leonardo DiCaprio"), Actor("Elliot Page")]
    assert "probe for 'genres' failed unexpectedly" in caplog.text
