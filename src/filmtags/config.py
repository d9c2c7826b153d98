"""Runtime configuration for scraping and extraction."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import os
from typing import Mapping

from filmtags.locale import Locale, parse_locales


DEFAULT_LOCALE = "en-US"
DEFAULT_USER_AGENT = "filmtags/0.1"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_KEYWORD_LIMIT = 0

OPTION_SEPARATOR = ":"
OPTION_KV_SEPARATOR = "="

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw_value!r}")


def _parse_non_negative_int(*, name: str, raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.1) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ExtractionContext:
    """Read-only configuration handed to every probe and pass."""

    languages: tuple[Locale, ...] = ()
    default_locale: Locale = field(default_factory=lambda: Locale.parse(DEFAULT_LOCALE))
    use_structured_data: bool = False
    use_full_credits: bool = False
    use_keywords: bool = False
    keyword_limit: int = DEFAULT_KEYWORD_LIMIT
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("filmtags"))

    @property
    def preferred_locale(self) -> Locale:
        """The most significant configured language, else the default one."""

        if self.languages:
            return self.languages[0]
        return self.default_locale


@dataclass(frozen=True, slots=True)
class ScraperSettings:
    """Validated settings loaded from the environment and command line."""

    languages: tuple[Locale, ...]
    default_locale: Locale
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    use_structured_data: bool = False
    use_full_credits: bool = False
    use_keywords: bool = False
    keyword_limit: int = DEFAULT_KEYWORD_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ScraperSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        default_locale = Locale.parse(source.get("FILMTAGS_DEFAULT_LOCALE", DEFAULT_LOCALE))
        languages_raw = source.get("FILMTAGS_LANGUAGES", default_locale.http_header).strip()
        if not languages_raw:
            raise ValueError("FILMTAGS_LANGUAGES cannot be empty")

        user_agent = source.get("FILMTAGS_USER_AGENT", DEFAULT_USER_AGENT).strip()
        if not user_agent:
            raise ValueError("FILMTAGS_USER_AGENT cannot be empty")
        if "\r" in user_agent or "\n" in user_agent:
            raise ValueError("FILMTAGS_USER_AGENT must be a single line")

        timeout_seconds = _parse_positive_float(
            name="FILMTAGS_TIMEOUT_SECONDS",
            raw_value=source.get("FILMTAGS_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)),
        )
        max_retries = _parse_non_negative_int(
            name="FILMTAGS_MAX_RETRIES",
            raw_value=source.get("FILMTAGS_MAX_RETRIES", str(DEFAULT_MAX_RETRIES)),
        )
        keyword_limit = _parse_non_negative_int(
            name="FILMTAGS_KEYWORD_LIMIT",
            raw_value=source.get("FILMTAGS_KEYWORD_LIMIT", str(DEFAULT_KEYWORD_LIMIT)),
        )

        return cls(
            languages=parse_locales(languages_raw),
            default_locale=default_locale,
            user_agent=user_agent,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            use_structured_data=_parse_bool(
                name="FILMTAGS_USE_JSONLD", raw_value=source.get("FILMTAGS_USE_JSONLD", "false")
            ),
            use_full_credits=_parse_bool(
                name="FILMTAGS_FULL_CREDITS", raw_value=source.get("FILMTAGS_FULL_CREDITS", "false")
            ),
            use_keywords=_parse_bool(name="FILMTAGS_KEYWORDS", raw_value=source.get("FILMTAGS_KEYWORDS", "false")),
            keyword_limit=keyword_limit,
        )

    def with_languages(self, raw: str) -> "ScraperSettings":
        """Replace the preferred languages with a colon-separated locale list."""

        return replace(self, languages=parse_locales(raw))

    def apply_options(self, raw: str) -> "ScraperSettings":
        """Apply a scraper option string such as ``jsonld=true:keyword-limit=10``."""

        if not raw.strip():
            return self

        updates: dict[str, object] = {}
        for pair in raw.split(OPTION_SEPARATOR):
            parts = pair.split(OPTION_KV_SEPARATOR)
            if len(parts) != 2:
                raise ValueError(f"Malformed option: {pair!r}")
            key, value = parts[0].strip(), parts[1].strip()
            if key == "jsonld":
                updates["use_structured_data"] = _parse_bool(name=key, raw_value=value)
            elif key == "fullcredits":
                updates["use_full_credits"] = _parse_bool(name=key, raw_value=value)
            elif key == "keywords":
                updates["use_keywords"] = _parse_bool(name=key, raw_value=value)
            elif key == "keyword-limit":
                updates["keyword_limit"] = _parse_non_negative_int(name=key, raw_value=value)
            else:
                raise ValueError(f"Unknown option: {key!r}")
        return replace(self, **updates)

    def to_context(self, logger: logging.Logger | None = None) -> ExtractionContext:
        return ExtractionContext(
            languages=self.languages,
            default_locale=self.default_locale,
            use_structured_data=self.use_structured_data,
            use_full_credits=self.use_full_credits,
            use_keywords=self.use_keywords,
            keyword_limit=self.keyword_limit,
            user_agent=self.user_agent,
            timeout_seconds=self.timeout_seconds,
            max_retries=self.max_retries,
            logger=logger or logging.getLogger("filmtags"),
        )
