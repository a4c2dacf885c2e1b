"""Output filename helpers."""

from __future__ import annotations

import re

DEFAULT_MAX_CHARS = 50
DEFAULT_PLACEHOLDER = "_"

# Path separators, Windows-reserved punctuation, '%' and '.', plus C0/C1 control characters
_UNSAFE_CHARS = re.compile(r'[/\\?%*:|"<>.\x00-\x1f\x7f-\x9f]')


def sanitize_filename(
    name: str,
    max_chars: int | None = DEFAULT_MAX_CHARS,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    """Make a chapter title safe to embed in a filename.

    Each unsafe character is replaced by ``placeholder``; all other text,
    including non-Latin scripts, is kept as-is.

    Args:
        name: Text to sanitize.
        max_chars: Maximum number of characters kept (None = no limit).
        placeholder: Replacement for unsafe characters.

    Returns:
        The sanitized, truncated text.
    """
    safe = _UNSAFE_CHARS.sub(placeholder, name)
    if max_chars is not None and len(safe) > max_chars:
        safe = safe[:max_chars]
    return safe


def chapter_filename(
    stem: str,
    index: int,
    title: str,
    extension: str = "pdf",
    max_chars: int | None = DEFAULT_MAX_CHARS,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    """Build ``<stem>_chapter_<index>_<title>.<extension>``.

    Args:
        stem: Stem of the source file.
        index: 1-based chapter ordinal.
        title: Chapter title (sanitized here).
        extension: Output extension, with or without the leading dot.
        max_chars: Maximum characters kept from the title.
        placeholder: Replacement for unsafe characters.
    """
    safe_title = sanitize_filename(title, max_chars=max_chars, placeholder=placeholder)
    return f"{stem}_chapter_{index}_{safe_title}.{extension.lstrip('.')}"
