"""Structured logging helpers.

Loggers obtained through get_logger() carry a default "component" field so
log lines from the transport, renderer and HTTP layers can be filtered apart.
"""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its component field with per-call extra."""

    def process(self, msg, kwargs):
        # Per-call extra wins over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger with an optional default component field.

    Args:
        name: Logger name (typically __name__)
        component: Optional component identifier injected into all records

    Example:
        >>> logger = get_logger(__name__, component="transport")
        >>> logger.info("Message accepted", extra={"event": "transport.send.succeeded"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
