"""Mail transport interface shared by the SendGrid and SMTP variants."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from formmail.domain.models import NotificationDocument


@dataclass(frozen=True)
class DeliveryReceipt:
    """Provider acknowledgement of an accepted message.

    Attributes:
        transport: Name of the transport that sent the message
        message_id: Provider or Message-ID header identifier, when known
        status_code: Provider status code (HTTP status or SMTP reply code)
    """

    transport: str
    message_id: Optional[str] = None
    status_code: Optional[int] = None


class MailTransport(ABC):
    """Sends one NotificationDocument per call.

    Implementations make exactly one outbound attempt per send() and never
    retry. A per-call timeout overrides the default the transport was built
    with.
    """

    name: str = "base"

    def __init__(self, timeout: float = 15.0) -> None:
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got: {timeout}")
        self.timeout = timeout

    @abstractmethod
    def send(
        self, document: NotificationDocument, timeout: Optional[float] = None
    ) -> DeliveryReceipt:
        """Deliver a document to the provider.

        Args:
            document: Rendered notification document
            timeout: Deadline in seconds for this call (defaults to self.timeout)

        Returns:
            DeliveryReceipt describing the accepted message

        Raises:
            TransportError: On any failure, categorised by kind
        """

    def close(self) -> None:
        """Release long-lived resources. Safe to call more than once."""

    def _effective_timeout(self, timeout: Optional[float]) -> float:
        return self.timeout if timeout is None else timeout
