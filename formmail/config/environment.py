"""Environment variable loading and validation."""

import os
from typing import List, Optional

from formmail.utils.addresses import is_valid_address, parse_recipients

from .exceptions import ConfigurationError

DEFAULT_FRONTEND_URL = "http://localhost:3000"


class EnvironmentConfig:
    """Environment variable configuration holder.

    Secrets and addresses live here rather than in the YAML file so the same
    config.yaml can be shared between environments.
    """

    def __init__(
        self,
        sender_email: str,
        contact_email: str,
        hr_email: str,
        sendgrid_api_key: Optional[str] = None,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        frontend_url: Optional[str] = None,
        port: Optional[int] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.sender_email = sender_email
        self.contact_email = contact_email
        self.hr_email = hr_email
        self.sendgrid_api_key = sendgrid_api_key
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.frontend_url = frontend_url or DEFAULT_FRONTEND_URL
        self.port = port
        self.log_level = log_level
        self.environment = environment or "local"

    @property
    def contact_recipients(self) -> List[str]:
        """Addresses that receive contact form notifications."""
        return parse_recipients(self.contact_email, "CONTACT_EMAIL")

    @property
    def hr_recipients(self) -> List[str]:
        """Addresses that receive job application notifications."""
        return parse_recipients(self.hr_email, "HR_EMAIL")

    def __repr__(self) -> str:
        # Credentials are deliberately left out
        return (
            f"EnvironmentConfig(sender_email={self.sender_email!r}, "
            f"contact_email={self.contact_email!r}, hr_email={self.hr_email!r}, "
            f"smtp_host={self.smtp_host!r}, smtp_port={self.smtp_port!r})"
        )


def load_environment_config(transport: str = "sendgrid") -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SENDER_EMAIL: From address (must be a verified sender with the provider)
    - CONTACT_EMAIL: Recipient(s) for contact form submissions
    - HR_EMAIL: Recipient(s) for job applications
    - SENDGRID_API_KEY: when the sendgrid transport is selected
    - SMTP_HOST, SMTP_PORT: when the smtp transport is selected

    Optional environment variables:
    - SMTP_USER / SMTP_PASS: relay credentials (both or neither)
    - FRONTEND_URL: origin allowed by CORS (default http://localhost:3000)
    - PORT: listening port override
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: label added to every log record (default "local")

    SENDGRID_SENDER_EMAIL is accepted as a fallback for SENDER_EMAIL.

    Args:
        transport: Selected transport type ("sendgrid" or "smtp")

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    sender_email = os.getenv("SENDER_EMAIL") or os.getenv("SENDGRID_SENDER_EMAIL")
    contact_email = os.getenv("CONTACT_EMAIL")
    hr_email = os.getenv("HR_EMAIL")

    sendgrid_api_key = os.getenv("SENDGRID_API_KEY")
    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")

    frontend_url = os.getenv("FRONTEND_URL")
    port_str = os.getenv("PORT")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    if not sender_email:
        errors.append("Missing required environment variable: SENDER_EMAIL")
    elif not is_valid_address(sender_email):
        errors.append(f"Invalid email address format in SENDER_EMAIL: '{sender_email}'")

    for name, value in (("CONTACT_EMAIL", contact_email), ("HR_EMAIL", hr_email)):
        if not value:
            errors.append(f"Missing required environment variable: {name}")
            continue
        try:
            parse_recipients(value, name)
        except ValueError as e:
            errors.append(str(e))

    if transport == "sendgrid":
        if not sendgrid_api_key:
            errors.append(
                "Missing required environment variable: SENDGRID_API_KEY "
                "(required by the sendgrid transport)"
            )
    elif transport == "smtp":
        if not smtp_host:
            errors.append(
                "Missing required environment variable: SMTP_HOST (required by the smtp transport)"
            )
        if not smtp_port_str:
            errors.append(
                "Missing required environment variable: SMTP_PORT (required by the smtp transport)"
            )
        if smtp_user and not smtp_pass:
            errors.append(
                "SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication."
            )
        elif smtp_pass and not smtp_user:
            errors.append(
                "SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication."
            )

    smtp_port = _parse_port(smtp_port_str, "SMTP_PORT", errors)
    port = _parse_port(port_str, "PORT", errors)

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Ensure all required environment variables are set",
                "Check that email addresses are valid",
            ],
        )

    return EnvironmentConfig(
        sender_email=sender_email,
        contact_email=contact_email,
        hr_email=hr_email,
        sendgrid_api_key=sendgrid_api_key,
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        frontend_url=frontend_url,
        port=port,
        log_level=log_level.upper() if log_level else None,
        environment=environment,
    )


def _parse_port(value: Optional[str], name: str, errors: List[str]) -> Optional[int]:
    """Parse a port number, appending to errors instead of raising."""
    if not value:
        return None

    try:
        port = int(value)
    except ValueError:
        errors.append(f"Invalid {name}: '{value}'. Must be a valid integer.")
        return None

    if port < 1 or port > 65535:
        errors.append(f"Invalid {name}: {port}. Must be between 1 and 65535.")
        return None

    return port
