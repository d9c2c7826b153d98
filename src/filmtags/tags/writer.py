"""Incremental XML writer tracking the elements it still has to close."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, BinaryIO

from lxml import etree

DEFAULT_INDENT = "\t"
REPLACEMENT_CHAR = "\ufffd"

# characters outside the XML 1.0 Char production
_NON_XML_CHAR_RE = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    """Replace characters XML cannot carry with U+FFFD."""

    return _NON_XML_CHAR_RE.sub(REPLACEMENT_CHAR, text)


@dataclass(slots=True)
class _PendingElement:
    name: str
    context: Any
    has_children: bool = False


class TagDocumentWriter:
    """Write an XML document element by element to a binary sink.

    Open elements are kept on an explicit stack so that leaving the ``with``
    block closes whatever is still open, last opened first. The document is
    terminated with a newline. Sink errors propagate unchanged; output is not
    guaranteed to be well-formed after one.
    """

    def __init__(self, sink: BinaryIO, *, indent: str = DEFAULT_INDENT) -> None:
        self._sink = sink
        self._indent = indent
        self._pending: list[_PendingElement] = []
        self._document: Any = None
        self._xf: Any = None

    @property
    def open_elements(self) -> int:
        return len(self._pending)

    def __enter__(self) -> "TagDocumentWriter":
        self._document = etree.xmlfile(self._sink, encoding="UTF-8")
        self._xf = self._document.__enter__()
        self._xf.write_declaration()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            try:
                self.close_all()
                self.flush()
            except BaseException as error:
                self._abandon(error)
                raise
            self._document.__exit__(None, None, None)
            self._sink.write(b"\n")
            self._flush_sink()
        else:
            self._abandon(exc)

    def open_element(self, name: str) -> None:
        if self._pending:
            self._pending[-1].has_children = True
            self._newline(len(self._pending))
        context = self._xf.element(name)
        context.__enter__()
        self._pending.append(_PendingElement(name, context))

    def write_text(self, text: str) -> None:
        self._xf.write(xml_safe(text))

    def write_leaf(self, name: str, text: str) -> None:
        """Write ``<name>text</name>``; leaves never carry empty text."""

        if not text:
            raise ValueError(f"Refusing to write empty leaf element {name!r}")
        self.open_element(name)
        self.write_text(text)
        self.close_element()

    def close_element(self) -> str:
        if not self._pending:
            raise RuntimeError("No open element to close")
        pending = self._pending.pop()
        if pending.has_children:
            self._newline(len(self._pending))
        pending.context.__exit__(None, None, None)
        return pending.name

    def close_all(self) -> None:
        while self._pending:
            self.close_element()

    def flush(self) -> None:
        self._xf.flush()
        self._flush_sink()

    def _newline(self, depth: int) -> None:
        self._xf.write("\n" + self._indent * depth)

    def _flush_sink(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if callable(flush):
            flush()

    def _abandon(self, error: BaseException | None) -> None:
        self._pending.clear()
        document, self._document = self._document, None
        if document is not None:
            document.__exit__(type(error), error, getattr(error, "__traceback__", None))
