"""Custom exceptions for Chaptercutter."""


class ChaptercutterError(Exception):
    """Base exception for all Chaptercutter errors."""

    exit_code: int = 1
    default_hint: str | None = None

    def __init__(
        self,
        message: str,
        details: str | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.details = details
        self.hint = hint or self.default_hint
        super().__init__(message)


# Document errors (20-29)
class DocumentError(ChaptercutterError):
    """Error while reading or writing a PDF document."""

    exit_code = 20


class DocumentLoadError(DocumentError):
    """PDF is missing, corrupt or unreadable."""

    exit_code = 21
    default_hint = "Ensure the file exists and is a valid PDF document"


class ObjectNotFoundError(DocumentError):
    """An object identifier does not address a usable object."""

    exit_code = 22

    def __init__(self, ref, details: str | None = None):
        self.ref = ref
        super().__init__(f"Object {ref} not found", details=details)


class ChapterSaveError(DocumentError):
    """A chapter document could not be serialized."""

    exit_code = 23
    default_hint = "Check that the output directory is writable"


# Configuration errors (30-39)
class ConfigError(ChaptercutterError):
    """Configuration error."""

    exit_code = 30
    default_hint = "Fix or remove ~/.chaptercutter/config.yaml"
