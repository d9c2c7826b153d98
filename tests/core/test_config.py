from __future__ import annotations

import logging

import pytest

from filmtags.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ExtractionContext,
    ScraperSettings,
)
from filmtags.locale import Locale


def test_settings_load_defaults_from_empty_environment() -> None:
    settings = ScraperSettings.from_env({})

    assert settings.default_locale == Locale.parse("en-US")
    assert settings.languages == (Locale.parse("en-US"),)
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert settings.max_retries == DEFAULT_MAX_RETRIES
    assert not settings.use_structured_data
    assert not settings.use_full_credits
    assert not settings.use_keywords
    assert settings.keyword_limit == 0


def test_settings_read_overrides_from_environment() -> None:
    settings = ScraperSettings.from_env(
        {
            "FILMTAGS_LANGUAGES": "de-DE:en-US",
            "FILMTAGS_USER_AGENT": "test-agent/1.0",
            "FILMTAGS_TIMEOUT_SECONDS": "5",
            "FILMTAGS_MAX_RETRIES": "0",
            "FILMTAGS_KEYWORD_LIMIT": "10",
            "FILMTAGS_USE_JSONLD": "yes",
            "FILMTAGS_FULL_CREDITS": "1",
            "FILMTAGS_KEYWORDS": "true",
        }
    )

    assert [locale.http_header for locale in settings.languages] == ["de-DE", "en-US"]
    assert settings.user_agent == "test-agent/1.0"
    assert settings.timeout_seconds == 5.0
    assert settings.max_retries == 0
    assert settings.keyword_limit == 10
    assert settings.use_structured_data
    assert settings.use_full_credits
    assert settings.use_keywords


@pytest.mark.parametrize(
    ("key", "value", "message"),
    [
        ("FILMTAGS_DEFAULT_LOCALE", "english", "separated by '-'"),
        ("FILMTAGS_LANGUAGES", "  ", "FILMTAGS_LANGUAGES"),
        ("FILMTAGS_USER_AGENT", "agent\r\nX-Injected: 1", "single line"),
        ("FILMTAGS_TIMEOUT_SECONDS", "soon", "FILMTAGS_TIMEOUT_SECONDS"),
        ("FILMTAGS_MAX_RETRIES", "-1", "FILMTAGS_MAX_RETRIES"),
        ("FILMTAGS_KEYWORDS", "maybe", "FILMTAGS_KEYWORDS"),
    ],
)
def test_settings_reject_invalid_values(key: str, value: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ScraperSettings.from_env({key: value})


def test_apply_options_parses_option_string() -> None:
    settings = ScraperSettings.from_env({}).apply_options(
        "jsonld=true:fullcredits=true:keywords=true:keyword-limit=10"
    )

    assert settings.use_structured_data
    assert settings.use_full_credits
    assert settings.use_keywords
    assert settings.keyword_limit == 10


def test_apply_options_blank_string_is_a_no_op() -> None:
    settings = ScraperSettings.from_env({})

    assert settings.apply_options("  ") is settings


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("jsonld", "Malformed option"),
        ("jsonld=true=false", "Malformed option"),
        ("colour=blue", "Unknown option"),
        ("keyword-limit=many", "keyword-limit"),
    ],
)
def test_apply_options_rejects_bad_input(raw: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ScraperSettings.from_env({}).apply_options(raw)


def test_with_languages_and_to_context() -> None:
    logger = logging.getLogger("filmtags.test")
    settings = ScraperSettings.from_env({}).with_languages("fr-FR:en-US")

    context = settings.to_context(logger)

    assert context.logger is logger
    assert context.preferred_locale == Locale.parse("fr-FR")
    assert context.default_locale == Locale.parse("en-US")


def test_context_without_languages_prefers_default_locale() -> None:
    context = ExtractionContext(default_locale=Locale.parse("de-DE"))

    assert context.preferred_locale.http_header == "de-DE"
