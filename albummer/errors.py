"""Exception types for fatal compiler failures.

WHY: The CLI must tell a broken album (exit non-zero, no output) apart
from a degraded one (missing photo, unreadable stylesheet) that still
produces a document. Only fatal conditions get an exception type;
degraded conditions are absorbed where they happen and logged.

RULES:
- Every fatal error raised by the pipeline derives from AlbummerError
- Raised before the output file is created
"""


class AlbummerError(Exception):
    """Base class for errors that abort a compiler run."""


class AlbumParseError(AlbummerError):
    """Raised when the album description is unreadable or has no ``:folder``.

    RULES:
    - Missing folder directive message is "No folder in album file"
    """


class InventoryError(AlbummerError):
    """Raised when the media folder does not exist or is not a directory."""


class DocumentWriteError(AlbummerError):
    """Raised when the output document cannot be written."""
