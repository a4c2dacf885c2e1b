"""Core value model and text helpers."""

from chaptercutter.core.objects import (
    Array,
    Boolean,
    ByteString,
    Dictionary,
    Integer,
    MemoryStore,
    Name,
    Null,
    ObjectRef,
    ObjectStore,
    Real,
    Reference,
    Stream,
    Value,
)
from chaptercutter.core.text import decode_pdf_string

__all__ = [
    "Array",
    "Boolean",
    "ByteString",
    "Dictionary",
    "Integer",
    "MemoryStore",
    "Name",
    "Null",
    "ObjectRef",
    "ObjectStore",
    "Real",
    "Reference",
    "Stream",
    "Value",
    "decode_pdf_string",
]
