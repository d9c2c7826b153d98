"""Text normalization helpers shared by probes."""

from __future__ import annotations

import html
import re
from typing import Sequence, TypeVar

T = TypeVar("T")

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_text(raw: object) -> str:
    """Unescape HTML entities and normalize whitespace; non-strings become ``""``."""

    if not isinstance(raw, str):
        return ""
    return normalize_whitespace(html.unescape(raw))


def limit_items(items: Sequence[T], limit: int) -> list[T]:
    """Keep the first ``limit`` items in document order; ``limit <= 0`` keeps all."""

    if limit > 0:
        return list(items[:limit])
    return list(items)
