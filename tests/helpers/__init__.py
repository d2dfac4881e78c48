"""Test helper utilities for Form Mail Service tests."""

from .submissions import (
    RecordingTransport,
    contact_payload,
    job_application_payload,
    load_fixture_payload,
)

__all__ = [
    "RecordingTransport",
    "contact_payload",
    "job_application_payload",
    "load_fixture_payload",
]
