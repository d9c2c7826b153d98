"""Canonical data structures shared by probes, builder and serializer."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass(frozen=True, slots=True)
class LocalizedText:
    """Text carrying the IETF language tag it is written in."""

    text: str
    language: str = ""

    def is_empty(self) -> bool:
        return len(self.text) == 0


@dataclass(frozen=True, slots=True)
class Actor:
    """A cast member and, when known, the character they play."""

    name: str
    character: str = ""

    def is_empty(self) -> bool:
        return len(self.name) == 0


@dataclass(frozen=True, slots=True)
class Country:
    """Country-scoped data; ``name`` is an ISO 3166 alpha-3 code."""

    name: str
    law_rating: str = ""

    def is_empty(self) -> bool:
        return len(self.name) == 0


def _has_content(value: object) -> bool:
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, list):
        return any(_has_content(item) for item in value)
    is_empty = getattr(value, "is_empty", None)
    if callable(is_empty):
        return not is_empty()
    return value is not None


@dataclass(slots=True)
class MovieRecord:
    """Aggregated metadata for one film, filled pass by pass."""

    actors: list[Actor] = field(default_factory=list)
    countries: list[Country] = field(default_factory=list)
    date_released: str = ""
    date_tagged: str = ""
    directors: list[str] = field(default_factory=list)
    genres: list[LocalizedText] = field(default_factory=list)
    imdb: str = ""
    keywords: list[LocalizedText] = field(default_factory=list)
    producers: list[str] = field(default_factory=list)
    synopses: list[LocalizedText] = field(default_factory=list)
    titles: list[LocalizedText] = field(default_factory=list)
    writers: list[str] = field(default_factory=list)
    _frozen: bool = field(default=False, repr=False, compare=False)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls) if not item.name.startswith("_"))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "MovieRecord":
        """Reject further writes; returns self for chaining."""

        self._frozen = True
        return self

    def set_field(self, name: str, value: object) -> None:
        """Assign a field. Empty values are rejected so fields are never cleared."""

        if self._frozen:
            raise RuntimeError(f"MovieRecord is frozen, cannot set {name!r}")
        if name not in self.field_names():
            raise KeyError(f"MovieRecord has no field {name!r}")
        current = getattr(self, name)
        if isinstance(current, list) != isinstance(value, list):
            raise TypeError(f"Field {name!r} expects {type(current).__name__}, got {type(value).__name__}")
        if not _has_content(value):
            raise ValueError(f"Refusing to set field {name!r} to an empty value")
        setattr(self, name, list(value) if isinstance(value, list) else value)
