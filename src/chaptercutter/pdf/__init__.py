"""PDF document store backed by pypdf."""

from chaptercutter.pdf.document import ChapterDocument, PdfSource, to_value

__all__ = ["ChapterDocument", "PdfSource", "to_value"]
