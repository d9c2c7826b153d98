"""Probe results: a value or an ordinary, non-fatal failure reason."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class ProbeOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


@dataclass(frozen=True, slots=True)
class ProbeResult(Generic[T]):
    """Outcome of one probe; ``value`` is only meaningful when ``found``."""

    outcome: ProbeOutcome
    value: T | None = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.outcome is ProbeOutcome.FOUND

    @classmethod
    def ok(cls, value: T) -> "ProbeResult[T]":
        return cls(ProbeOutcome.FOUND, value)

    @classmethod
    def not_found(cls, reason: str) -> "ProbeResult[T]":
        return cls(ProbeOutcome.NOT_FOUND, None, reason)

    @classmethod
    def malformed(cls, reason: str) -> "ProbeResult[T]":
        return cls(ProbeOutcome.MALFORMED, None, reason)


Probe = Callable[[], ProbeResult]


def non_empty_list(values: list[T], reason: str) -> ProbeResult[list[T]]:
    """Wrap a list as found, or as not found when nothing survived filtering."""

    if values:
        return ProbeResult.ok(values)
    return ProbeResult.not_found(reason)
