"""Factory function for instantiating the configured mail transport."""

import logging

from formmail.config.environment import EnvironmentConfig
from formmail.config.models import AppConfig

from .base import MailTransport
from .exceptions import TransportConfigurationError
from .sendgrid import SendGridTransport
from .smtp import SMTPRelayTransport

logger = logging.getLogger(__name__)

SUPPORTED_TRANSPORTS = ("sendgrid", "smtp")


def get_transport(app_config: AppConfig, env_config: EnvironmentConfig) -> MailTransport:
    """Create the transport selected by mail.transport.

    Credentials come from the environment; timeouts, TLS and the API endpoint
    come from the YAML mail section.

    Args:
        app_config: Application configuration
        env_config: Environment configuration holding credentials

    Returns:
        Instantiated transport

    Raises:
        TransportConfigurationError: If the transport type is unknown or its
            settings are incomplete
    """
    mail = app_config.mail
    transport_type = str(mail.transport).lower()

    if transport_type not in SUPPORTED_TRANSPORTS:
        raise TransportConfigurationError(
            f"Unknown mail transport: {mail.transport}. "
            f"Supported transports: {', '.join(SUPPORTED_TRANSPORTS)}"
        )

    logger.debug(
        "Creating mail transport",
        extra={
            "event": "transport.creating",
            "transport": transport_type,
            "timeout": mail.timeout_seconds,
        },
    )

    if transport_type == "sendgrid":
        return SendGridTransport(
            api_key=env_config.sendgrid_api_key or "",
            api_url=mail.sendgrid_api_url,
            timeout=mail.timeout_seconds,
        )

    return SMTPRelayTransport(
        host=env_config.smtp_host or "",
        port=env_config.smtp_port or 0,
        username=env_config.smtp_user,
        password=env_config.smtp_pass,
        use_tls=mail.use_tls,
        timeout=mail.timeout_seconds,
    )
