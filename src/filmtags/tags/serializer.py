"""Emit a ``MovieRecord`` as a Matroska tag document.

Layout::

    <Tags>
      <Tag>
        <Targets><TargetTypeValue>50</TargetTypeValue></Targets>
        <Simple><Name>TITLE</Name><String>...</String><TagLanguageIETF>en</TagLanguageIETF></Simple>
        <Simple><Name>ACTOR</Name><String>...</String>
          <Simple><Name>CHARACTER</Name><String>...</String></Simple>
        </Simple>
      </Tag>
    </Tags>
"""

from __future__ import annotations

from typing import Any, BinaryIO, Callable

from filmtags.models import Actor, Country, LocalizedText, MovieRecord
from filmtags.tags.fields import MOVIE_FIELDS, FieldDescriptor, ValueKind
from filmtags.tags.writer import TagDocumentWriter

# Matroska target type for a whole movie
TARGET_TYPE_MOVIE = "50"

CHARACTER_TAG = "CHARACTER"
LAW_RATING_TAG = "LAW_RATING"


def _open_simple(writer: TagDocumentWriter, tag: str, value: str) -> None:
    writer.open_element("Simple")
    writer.write_leaf("Name", tag)
    writer.write_leaf("String", value)


def _emit_plain(writer: TagDocumentWriter, tag: str, value: str) -> None:
    _open_simple(writer, tag, value)
    writer.close_element()


def _emit_localized(writer: TagDocumentWriter, tag: str, value: LocalizedText) -> None:
    _open_simple(writer, tag, value.text)
    if value.language:
        writer.write_leaf("TagLanguageIETF", value.language)
    writer.close_element()


def _emit_nested(writer: TagDocumentWriter, tag: str, value: str, sub_tag: str, sub_value: str) -> None:
    _open_simple(writer, tag, value)
    if sub_value:
        _emit_plain(writer, sub_tag, sub_value)
    writer.close_element()


def _emit_actor(writer: TagDocumentWriter, tag: str, value: Actor) -> None:
    _emit_nested(writer, tag, value.name, CHARACTER_TAG, value.character)


def _emit_country(writer: TagDocumentWriter, tag: str, value: Country) -> None:
    _emit_nested(writer, tag, value.name, LAW_RATING_TAG, value.law_rating)


_EMITTERS: dict[ValueKind, Callable[[TagDocumentWriter, str, Any], None]] = {
    ValueKind.PLAIN: _emit_plain,
    ValueKind.LOCALIZED: _emit_localized,
    ValueKind.ACTOR: _emit_actor,
    ValueKind.COUNTRY: _emit_country,
}


def emit(
    record: MovieRecord,
    writer: TagDocumentWriter,
    fields: tuple[FieldDescriptor, ...] = MOVIE_FIELDS,
) -> int:
    """Write one ``Simple`` element per non-empty value, in table order.

    Returns the number of top-level ``Simple`` elements written.
    """

    written = 0
    for descriptor in fields:
        emit_value = _EMITTERS[descriptor.kind]
        for value in descriptor.values(record):
            if descriptor.is_empty(value):
                continue
            emit_value(writer, descriptor.tag, value)
            written += 1
    return written


def write_tags(record: MovieRecord, sink: BinaryIO) -> int:
    """Write the complete tag document for ``record`` to a binary sink."""

    with TagDocumentWriter(sink) as writer:
        writer.open_element("Tags")
        writer.open_element("Tag")
        writer.open_element("Targets")
        writer.write_leaf("TargetTypeValue", TARGET_TYPE_MOVIE)
        writer.close_element()
        return emit(record, writer)
