"""Exceptions raised by mail transports."""

from enum import Enum
from typing import Optional


class TransportErrorKind(str, Enum):
    """Failure categories shared by every transport."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    REJECTED = "rejected"
    MALFORMED_REQUEST = "malformed_request"


class TransportError(Exception):
    """A send attempt failed.

    The message is safe to log; diagnostic holds whatever the provider or the
    underlying library reported (response body, SMTP reply) and is kept for
    server-side logs only.
    """

    def __init__(
        self,
        kind: TransportErrorKind,
        message: str,
        diagnostic: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Initialize transport error.

        Args:
            kind: Failure category
            message: Human-readable error message
            diagnostic: Raw provider or library detail
            status_code: Provider status code when one was received
        """
        super().__init__(message)
        self.kind = TransportErrorKind(kind)
        self.message = message
        self.diagnostic = diagnostic
        self.status_code = status_code


class TransportConfigurationError(Exception):
    """The selected transport cannot be built from the current configuration."""

    pass
