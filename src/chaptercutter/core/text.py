"""Decoding of PDF text strings."""

from __future__ import annotations

import codecs


def decode_pdf_string(data: bytes) -> str:
    """Convert raw PDF string bytes into readable text.

    Strings starting with the UTF-16BE byte-order mark are decoded as
    UTF-16BE. Everything else, and any UTF-16 payload that fails to decode
    (odd length, unpaired surrogates), is decoded as UTF-8 with invalid
    sequences replaced. Never raises.

    Args:
        data: Raw string bytes from the document.

    Returns:
        Decoded text.
    """
    if len(data) >= 2 and data.startswith(codecs.BOM_UTF16_BE):
        try:
            return data[2:].decode("utf-16-be")
        except UnicodeDecodeError:
            pass
    return data.decode("utf-8", errors="replace")
