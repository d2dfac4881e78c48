"""SendGrid v3 mail send transport."""

from typing import Any, Dict, Optional

import requests

from formmail import __version__
from formmail.domain.models import NotificationDocument
from formmail.logging import get_logger

from .base import DeliveryReceipt, MailTransport
from .exceptions import TransportConfigurationError, TransportError, TransportErrorKind

logger = get_logger(__name__, component="transport")

DEFAULT_API_URL = "https://api.sendgrid.com/v3/mail/send"

# Longest provider body kept as a diagnostic
MAX_DIAGNOSTIC_LENGTH = 2000


def classify_status(status_code: int) -> TransportErrorKind:
    """Map a non-2xx SendGrid status code to a failure kind."""
    if status_code == 401:
        return TransportErrorKind.AUTHENTICATION
    if status_code in (400, 413):
        return TransportErrorKind.MALFORMED_REQUEST
    if status_code >= 500:
        # Provider outage, not a verdict on the message
        return TransportErrorKind.NETWORK
    return TransportErrorKind.REJECTED


def build_payload(document: NotificationDocument) -> Dict[str, Any]:
    """Build the v3 mail send request body for a document.

    Content parts are ordered text/plain then text/html, which is the order
    SendGrid requires.
    """
    sender: Dict[str, str] = {"email": document.sender}
    if document.sender_name:
        sender["name"] = document.sender_name

    payload: Dict[str, Any] = {
        "personalizations": [
            {"to": [{"email": recipient} for recipient in document.recipients]}
        ],
        "from": sender,
        "subject": document.subject,
        "content": [
            {"type": "text/plain", "value": document.text_body},
            {"type": "text/html", "value": document.html_body},
        ],
    }

    if document.reply_to:
        payload["reply_to"] = {"email": document.reply_to}

    if document.attachments:
        payload["attachments"] = [
            {
                "content": attachment.content_base64(),
                "filename": attachment.filename,
                "type": attachment.mime_type,
                "disposition": attachment.disposition,
            }
            for attachment in document.attachments
        ]

    return payload


class SendGridTransport(MailTransport):
    """Sends documents through the SendGrid HTTP API with a bearer API key.

    One requests.Session is created per transport and reused for every send,
    so connections to the API are pooled across requests.
    """

    name = "sendgrid"

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            api_key: SendGrid API key
            api_url: Mail send endpoint
            timeout: Default deadline in seconds for each send
            session: Pre-built session (tests inject a mock here)

        Raises:
            TransportConfigurationError: If the API key is empty
        """
        if not api_key or not api_key.strip():
            raise TransportConfigurationError("SendGrid API key cannot be empty")

        super().__init__(timeout=timeout)
        self.api_url = api_url

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_key.strip()}",
                "Content-Type": "application/json",
                "User-Agent": f"formmail-service/{__version__}",
            }
        )

    def send(
        self, document: NotificationDocument, timeout: Optional[float] = None
    ) -> DeliveryReceipt:
        effective_timeout = self._effective_timeout(timeout)
        payload = build_payload(document)

        logger.debug(
            f"POST {self.api_url}",
            extra={
                "event": "transport.send.request",
                "transport": self.name,
                "recipient_count": len(document.recipients),
                "attachment_count": len(document.attachments),
                "timeout": effective_timeout,
            },
        )

        try:
            response = self._session.post(
                self.api_url, json=payload, timeout=effective_timeout
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(
                TransportErrorKind.NETWORK,
                f"SendGrid request timed out after {effective_timeout}s",
                diagnostic=str(e),
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                TransportErrorKind.NETWORK,
                "Could not connect to SendGrid",
                diagnostic=str(e),
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                TransportErrorKind.NETWORK,
                f"SendGrid request failed: {e.__class__.__name__}",
                diagnostic=str(e),
            ) from e

        if response.status_code >= 400:
            kind = classify_status(response.status_code)
            logger.error(
                f"SendGrid returned HTTP {response.status_code}",
                extra={
                    "event": "transport.send.rejected",
                    "transport": self.name,
                    "status_code": response.status_code,
                    "error_kind": kind.value,
                },
            )
            raise TransportError(
                kind,
                f"SendGrid returned HTTP {response.status_code}: {response.reason}",
                diagnostic=(response.text or "")[:MAX_DIAGNOSTIC_LENGTH],
                status_code=response.status_code,
            )

        message_id = response.headers.get("X-Message-Id")
        logger.debug(
            "SendGrid accepted message",
            extra={
                "event": "transport.send.accepted",
                "transport": self.name,
                "status_code": response.status_code,
                "message_id": message_id,
            },
        )

        return DeliveryReceipt(
            transport=self.name,
            message_id=message_id,
            status_code=response.status_code,
        )

    def close(self) -> None:
        self._session.close()
