"""Exception hierarchy for the botwire Bot API client."""

from typing import Any, Optional


class BotwireError(Exception):
    """Base class for every error raised by botwire."""


class EncodingError(BotwireError):
    """A structured option value could not be JSON-encoded."""


class InvalidArgumentError(BotwireError, ValueError):
    """A call was rejected locally, before any network attempt."""


class TransportError(BotwireError):
    """The HTTP exchange itself failed (connection, timeout, non-2xx download)."""


class DecodeError(BotwireError):
    """The response body is not a valid Bot API envelope."""


class APIException(BotwireError):
    """The Bot API rejected a well-formed request.

    Attributes:
        error_code: Numeric code reported by the platform, verbatim.
        description: Human-readable description reported by the platform.
        parameters: Optional ``ResponseParameters`` (``retry_after``,
            ``migrate_to_chat_id``) attached to the failure.
    """

    def __init__(self, error_code: Optional[int], description: Optional[str] = None, parameters: Any = None) -> None:
        """Initialise with the platform-reported code and description."""
        self.error_code = error_code
        self.description = description
        self.parameters = parameters
        super().__init__(f"API error {error_code}: {description or 'Unknown error'}")
