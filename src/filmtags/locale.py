"""Language/region value object used for HTTP negotiation and tag decoration."""

from __future__ import annotations

from dataclasses import dataclass
import re

import pycountry

_LOCALE_RE = re.compile(r"^([a-z]{2})-([A-Z]{2})$")


def _country(alpha2: str):
    return pycountry.countries.get(alpha_2=alpha2)


@dataclass(frozen=True, slots=True)
class Locale:
    """A validated ``ll-CC`` pair such as ``en-US`` or ``de-DE``.

    The language must be an ISO 639-1 code and the country an ISO 3166-1
    alpha-2 code.
    """

    language: str
    alpha2: str

    @classmethod
    def parse(cls, raw: str) -> "Locale":
        """Parse ``ll-CC``; case is significant, as in HTTP language ranges."""

        match = _LOCALE_RE.match(raw.strip())
        if match is None:
            raise ValueError(f"Expected language and country separated by '-', got {raw!r}")
        language, country = match.groups()
        if pycountry.languages.get(alpha_2=language) is None:
            raise ValueError(f"Invalid language code {language!r}")
        if _country(country) is None:
            raise ValueError(f"Invalid country code {country!r}")
        return cls(language=language, alpha2=country)

    @property
    def alpha3(self) -> str:
        return _country(self.alpha2).alpha_3

    @property
    def http_header(self) -> str:
        return f"{self.language}-{self.alpha2}"

    def __str__(self) -> str:
        return self.http_header


def parse_locales(raw: str, *, separator: str = ":") -> tuple[Locale, ...]:
    """Parse a separator-delimited list of locales, keeping their order."""

    parts = [part.strip() for part in raw.split(separator) if part.strip()]
    if not parts:
        raise ValueError("At least one locale is required")
    return tuple(Locale.parse(part) for part in parts)
