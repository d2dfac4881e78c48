"""Mail transports.

Every transport implements MailTransport.send() and raises TransportError
with a TransportErrorKind on failure:

- sendgrid: SendGrid v3 HTTP API with a bearer API key
- smtp: SMTP relay with username/password
"""

from .base import DeliveryReceipt, MailTransport
from .exceptions import TransportConfigurationError, TransportError, TransportErrorKind
from .factory import get_transport
from .sendgrid import SendGridTransport
from .smtp import SMTPRelayTransport

__all__ = [
    "MailTransport",
    "DeliveryReceipt",
    "SendGridTransport",
    "SMTPRelayTransport",
    "get_transport",
    # Exceptions
    "TransportError",
    "TransportErrorKind",
    "TransportConfigurationError",
]
