"""SMTP relay transport built on smtplib.

Supports implicit TLS on port 465, optional STARTTLS on other ports and
username/password authentication. The smtplib classes are injectable so the
connection lifecycle can be tested without a server.
"""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from formmail.domain.models import NotificationDocument
from formmail.logging import get_logger
from formmail.utils.addresses import build_sender_address

from .base import DeliveryReceipt, MailTransport
from .exceptions import TransportConfigurationError, TransportError, TransportErrorKind

logger = get_logger(__name__, component="transport")

IMPLICIT_TLS_PORT = 465


def build_message(document: NotificationDocument) -> EmailMessage:
    """Build a MIME message from a document.

    The result is multipart/alternative (text then HTML), wrapped in
    multipart/mixed when there are attachments.

    Raises:
        ValueError: If a header value cannot be encoded (e.g. embedded newlines)
    """
    message = EmailMessage()
    message["Subject"] = document.subject
    message["From"] = build_sender_address(document.sender, document.sender_name)
    message["To"] = ", ".join(document.recipients)
    if document.reply_to:
        message["Reply-To"] = document.reply_to

    domain = document.sender.rsplit("@", 1)[-1] if "@" in document.sender else None
    message["Message-ID"] = make_msgid(domain=domain)

    message.set_content(document.text_body)
    message.add_alternative(document.html_body, subtype="html")

    for attachment in document.attachments:
        message.add_attachment(
            attachment.content,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
            disposition=attachment.disposition,
        )

    return message


def _smtp_reply(error: smtplib.SMTPResponseException) -> str:
    reply = error.smtp_error
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8", errors="replace")
    return f"{error.smtp_code} {reply}"


def classify_smtp_error(error: Exception) -> TransportErrorKind:
    """Map an smtplib or socket exception to a failure kind."""
    if isinstance(error, smtplib.SMTPAuthenticationError):
        return TransportErrorKind.AUTHENTICATION
    if isinstance(error, (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError)):
        return TransportErrorKind.NETWORK
    if isinstance(
        error,
        (
            smtplib.SMTPRecipientsRefused,
            smtplib.SMTPSenderRefused,
            smtplib.SMTPDataError,
        ),
    ):
        return TransportErrorKind.REJECTED
    if isinstance(error, smtplib.SMTPException):
        return TransportErrorKind.REJECTED
    if isinstance(error, OSError):
        return TransportErrorKind.NETWORK
    if isinstance(error, ValueError):
        return TransportErrorKind.MALFORMED_REQUEST
    return TransportErrorKind.REJECTED


def _diagnostic(error: Exception) -> str:
    if isinstance(error, smtplib.SMTPRecipientsRefused):
        return "; ".join(
            f"{recipient}: {code} {reply.decode('utf-8', errors='replace') if isinstance(reply, bytes) else reply}"
            for recipient, (code, reply) in error.recipients.items()
        )
    if isinstance(error, smtplib.SMTPResponseException):
        return _smtp_reply(error)
    return str(error) or error.__class__.__name__


class SMTPRelayTransport(MailTransport):
    """Sends documents through an SMTP relay.

    A new connection is opened for each send and always closed afterwards,
    whether or not delivery succeeded.
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 15.0,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP transport with optional factory injection.

        Args:
            host: Relay hostname
            port: Relay port (465 selects implicit TLS)
            username: Login user; authentication is skipped when unset
            password: Login password
            use_tls: Upgrade with STARTTLS on non-465 ports
            timeout: Default socket timeout in seconds for each send
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)

        Raises:
            TransportConfigurationError: If host or port are missing
        """
        if not host:
            raise TransportConfigurationError("SMTP host cannot be empty")
        if not port:
            raise TransportConfigurationError("SMTP port cannot be empty")

        super().__init__(timeout=timeout)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def _connect(self, timeout: float):
        if self.port == IMPLICIT_TLS_PORT:
            logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
            return self.smtp_ssl_factory(
                self.host,
                self.port,
                context=ssl.create_default_context(),
                timeout=timeout,
            )

        logger.debug(f"Connecting to {self.host}:{self.port}")
        return self.smtp_factory(self.host, self.port, timeout=timeout)

    def _secure(self, smtp) -> None:
        if self.port != IMPLICIT_TLS_PORT and self.use_tls:
            logger.debug("Upgrading connection with STARTTLS")
            smtp.starttls(context=ssl.create_default_context())

    def send(
        self, document: NotificationDocument, timeout: Optional[float] = None
    ) -> DeliveryReceipt:
        effective_timeout = self._effective_timeout(timeout)

        try:
            message = build_message(document)
        except ValueError as e:
            raise TransportError(
                TransportErrorKind.MALFORMED_REQUEST,
                "Could not build MIME message",
                diagnostic=str(e),
            ) from e

        smtp = None
        try:
            smtp = self._connect(effective_timeout)
            # Bound before the upgrade so finally closes it
            self._secure(smtp)

            if self.username and self.password:
                logger.debug(f"Authenticating as {self.username}")
                smtp.login(self.username, self.password)

            refused = smtp.send_message(message)
            if refused:
                logger.warning(
                    "Relay refused some recipients",
                    extra={
                        "event": "transport.send.partial",
                        "transport": self.name,
                        "refused": sorted(refused),
                    },
                )

        except (smtplib.SMTPException, OSError, ValueError) as e:
            kind = classify_smtp_error(e)
            raise TransportError(
                kind,
                f"SMTP delivery via {self.host}:{self.port} failed: {e.__class__.__name__}",
                diagnostic=_diagnostic(e),
                status_code=getattr(e, "smtp_code", None),
            ) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

        logger.debug(
            "Relay accepted message",
            extra={
                "event": "transport.send.accepted",
                "transport": self.name,
                "message_id": message["Message-ID"],
            },
        )

        return DeliveryReceipt(
            transport=self.name, message_id=message["Message-ID"], status_code=250
        )
