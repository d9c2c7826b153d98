"""Matroska tag serialization."""

from .fields import MOVIE_FIELDS, Arity, FieldDescriptor, ValueKind
from .serializer import TARGET_TYPE_MOVIE, emit, write_tags
from .writer import TagDocumentWriter

__all__ = [
    "MOVIE_FIELDS",
    "TARGET_TYPE_MOVIE",
    "Arity",
    "FieldDescriptor",
    "TagDocumentWriter",
    "ValueKind",
    "emit",
    "write_tags",
]
