"""Email address helpers shared by configuration and transports."""

from email.utils import formataddr
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email


def parse_recipients(recipient_string: str, variable: str = "recipient list") -> List[str]:
    """Parse and validate comma-separated email addresses.

    Args:
        recipient_string: Comma-separated email addresses
        variable: Name of the setting the value came from, used in errors

    Returns:
        List of normalized email addresses in input order

    Raises:
        ValueError: If any address is invalid or the list is empty
    """
    recipients = []

    for email in (part.strip() for part in (recipient_string or "").split(",")):
        if not email:
            continue

        try:
            validated = validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address in {variable}: '{email}' - {e}") from e
        recipients.append(validated.normalized)

    if not recipients:
        raise ValueError(f"No valid email addresses found in {variable}")

    return recipients


def is_valid_address(email: str) -> bool:
    """Return True when email is a single syntactically valid address."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def build_sender_address(email: str, display_name: Optional[str] = None) -> str:
    """Build the From header value, e.g. "Careers <jobs@example.com>"."""
    if display_name:
        return formataddr((display_name, email))
    return email
