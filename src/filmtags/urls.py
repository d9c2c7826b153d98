"""Title identifiers and the page URLs derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from filmtags.errors import InvalidTitleError

TITLE_ID_PREFIX = "tt"
DEFAULT_HOST = "imdb.com"
SUPPORTED_HOSTS = frozenset({"imdb.com", "www.imdb.com", "m.imdb.com"})


def is_title_id(value: str) -> bool:
    """True for formally valid title ids: ``tt`` followed by at least 7 digits."""

    if len(value) < 9 or not value.startswith(TITLE_ID_PREFIX):
        return False
    digits = value[len(TITLE_ID_PREFIX):]
    return digits.isascii() and digits.isdigit()


@dataclass(frozen=True, slots=True)
class TitleTarget:
    """The film to scrape plus the URL flavour it was requested with."""

    title_id: str
    scheme: str = "https"
    country: str = ""

    @classmethod
    def parse(cls, raw: str) -> "TitleTarget":
        """Accept a bare title id, an ``imdb://tt...`` URL or a title page URL."""

        value = raw.strip()
        if is_title_id(value):
            return cls(title_id=value)

        parts = urlsplit(value)
        if parts.scheme == "imdb":
            if not is_title_id(parts.netloc):
                raise InvalidTitleError(value, "Host of an imdb:// URL must be a valid title id")
            return cls(title_id=parts.netloc)

        if not parts.scheme:
            # "www.imdb.com/title/tt..." without scheme
            parts = urlsplit(f"https://{value}")
        if parts.scheme not in {"http", "https"}:
            raise InvalidTitleError(value, f"URL scheme {parts.scheme!r} is not supported")
        if parts.hostname not in SUPPORTED_HOSTS:
            raise InvalidTitleError(value, "Host not supported")
        if not parts.path.startswith("/"):
            raise InvalidTitleError(value, "Title URL must have an absolute path")

        segments = parts.path.split("/")
        if len(segments) >= 4 and segments[2] == "title" and is_title_id(segments[3]):
            return cls(title_id=segments[3], scheme=parts.scheme, country=segments[1])
        if len(segments) >= 3 and segments[1] == "title" and is_title_id(segments[2]):
            return cls(title_id=segments[2], scheme=parts.scheme)
        raise InvalidTitleError(value, "URL does not point to a title page")

    @property
    def title_url(self) -> str:
        if self.country:
            return f"{self.scheme}://{DEFAULT_HOST}/{quote(self.country)}/title/{quote(self.title_id)}"
        return f"{self.scheme}://{DEFAULT_HOST}/title/{quote(self.title_id)}"

    @property
    def credits_url(self) -> str:
        return f"{self.title_url}/fullcredits"

    @property
    def keywords_url(self) -> str:
        return f"{self.title_url}/keywords"
