"""Static field table mapping ``MovieRecord`` attributes to Matroska tag names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable

from filmtags.models import Actor, Country, LocalizedText, MovieRecord


class Arity(str, Enum):
    SINGLE = "single"
    REPEATED = "repeated"


class ValueKind(str, Enum):
    PLAIN = "plain"
    LOCALIZED = "localized"
    ACTOR = "actor"
    COUNTRY = "country"


def _plain_is_empty(value: str) -> bool:
    return len(value) == 0


def _localized_is_empty(value: LocalizedText) -> bool:
    # a language tag without text is still empty
    return len(value.text) == 0


def _actor_is_empty(value: Actor) -> bool:
    return len(value.name) == 0


def _country_is_empty(value: Country) -> bool:
    return len(value.name) == 0


EMPTINESS_RULES: dict[ValueKind, Callable[[Any], bool]] = {
    ValueKind.PLAIN: _plain_is_empty,
    ValueKind.LOCALIZED: _localized_is_empty,
    ValueKind.ACTOR: _actor_is_empty,
    ValueKind.COUNTRY: _country_is_empty,
}


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """How one record attribute is read, named and checked for emptiness."""

    accessor: Callable[[MovieRecord], Any]
    tag: str
    arity: Arity
    kind: ValueKind

    def values(self, record: MovieRecord) -> list[Any]:
        value = self.accessor(record)
        if self.arity is Arity.REPEATED:
            return list(value)
        return [value]

    def is_empty(self, value: Any) -> bool:
        return EMPTINESS_RULES[self.kind](value)


MOVIE_FIELDS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor(attrgetter("actors"), "ACTOR", Arity.REPEATED, ValueKind.ACTOR),
    FieldDescriptor(attrgetter("countries"), "COUNTRY", Arity.REPEATED, ValueKind.COUNTRY),
    FieldDescriptor(attrgetter("date_released"), "DATE_RELEASED", Arity.SINGLE, ValueKind.PLAIN),
    FieldDescriptor(attrgetter("date_tagged"), "DATE_TAGGED", Arity.SINGLE, ValueKind.PLAIN),
    FieldDescriptor(attrgetter("directors"), "DIRECTOR", Arity.REPEATED, ValueKind.PLAIN),
    FieldDescriptor(attrgetter("genres"), "GENRE", Arity.REPEATED, ValueKind.LOCALIZED),
    FieldDescriptor(attrgetter("imdb"), "IMDB", Arity.SINGLE, ValueKind.PLAIN),
    FieldDescriptor(attrgetter("keywords"), "KEYWORDS", Arity.REPEATED, ValueKind.LOCALIZED),
    FieldDescriptor(attrgetter("producers"), "PRODUCER", Arity.REPEATED, ValueKind.PLAIN),
    FieldDescriptor(attrgetter("synopses"), "SYNOPSIS", Arity.REPEATED, ValueKind.LOCALIZED),
    FieldDescriptor(attrgetter("titles"), "TITLE", Arity.REPEATED, ValueKind.LOCALIZED),
    FieldDescriptor(attrgetter("writers"), "WRITTEN_BY", Arity.REPEATED, ValueKind.PLAIN),
)
