"""Domain errors that are allowed to reach the caller."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PageUnavailableError(Exception):
    """A page could not be fetched (transport failure or non-success status)."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (url={self.url})"


@dataclass(slots=True)
class DocumentParseError(Exception):
    """A fetched page could not be parsed or lacks its mandatory content."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(slots=True)
class InvalidTitleError(ValueError):
    """User input does not identify a film title."""

    value: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.value!r}"
