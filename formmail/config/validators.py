"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    rate_limit = config_dict.get("rate_limit", {})
    if isinstance(rate_limit, dict):
        if rate_limit.get("enabled") is False:
            warning_messages.append(
                "Rate limiting is disabled; form endpoints accept unlimited submissions"
            )

        max_requests = rate_limit.get("max_requests")
        if isinstance(max_requests, int) and max_requests > 100:
            warning_messages.append(
                f"High rate_limit.max_requests ({max_requests}) offers little protection against form spam"
            )

        if rate_limit.get("trust_forwarded_for") is True:
            warning_messages.append(
                "rate_limit.trust_forwarded_for is enabled; only use it behind a proxy that sets X-Forwarded-For"
            )

    mail = config_dict.get("mail", {})
    if isinstance(mail, dict):
        timeout = mail.get("timeout_seconds")
        if isinstance(timeout, (int, float)) and timeout > 60:
            warning_messages.append(
                f"Long mail.timeout_seconds ({timeout}) keeps request workers busy when the provider stalls"
            )
        if mail.get("transport") == "smtp" and mail.get("use_tls") is False:
            warning_messages.append(
                "SMTP transport without TLS sends credentials in clear text unless the port is 465"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
