"""Blog error kinds and the error type surfaced to the HTTP layer."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    INVALID_METADATA = "INVALID_METADATA"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    RSS_GENERATION = "RSS_GENERATION"
    UNKNOWN = "UNKNOWN"


_USER_MESSAGES = {
    ErrorKind.VALIDATION: "Invalid blog data. Please check the content format.",
    ErrorKind.CONTENT_NOT_FOUND: "The requested blog content could not be found.",
    ErrorKind.INVALID_METADATA: (
        "Invalid blog metadata. Please check the frontmatter format."
    ),
    ErrorKind.ROUTE_NOT_FOUND: "Blog page not found. Check the URL and try again.",
    ErrorKind.RSS_GENERATION: "Error generating RSS feed. Please try again later.",
}

_DEFAULT_USER_MESSAGE = "An unexpected error occurred with the blog. Please try again."


class BlogError(Exception):
    """Error raised by the content pipeline, tagged with an ``ErrorKind``.

    The HTTP layer maps ``kind`` to a status code in a single exception
    handler, so callers never attach status fields to exceptions themselves.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.details = details or {}

    @property
    def is_not_found(self) -> bool:
        return self.kind in (ErrorKind.CONTENT_NOT_FOUND, ErrorKind.ROUTE_NOT_FOUND)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "type": self.kind.value,
            "details": self.details,
        }


def user_friendly_message(error: BaseException | None) -> str:
    """Return a short message suitable for showing to a reader."""
    if isinstance(error, BlogError):
        return _USER_MESSAGES.get(error.kind, _DEFAULT_USER_MESSAGE)
    if error is not None and str(error):
        return str(error)
    return "An unexpected error occurred with the blog."
