"""Rendering of form submissions into notification documents.

- formatters: presence-key filtering and numbering of repeated records
- payloads: template context and attachment builders
- templates: Jinja2 rendering with HTML autoescaping
- documents: DocumentRenderer, the entry point used by the submission service
"""

from .documents import DocumentRenderer
from .exceptions import DocumentRenderError, RenderingError
from .formatters import (
    RecordFragment,
    format_education_history,
    format_employment_history,
    format_records,
    format_references,
    format_training_history,
)
from .payloads import build_attachments, build_contact_context, build_job_application_context
from .templates import TemplateRenderer

__all__ = [
    "DocumentRenderer",
    "TemplateRenderer",
    # Exceptions
    "RenderingError",
    "DocumentRenderError",
    # Formatters
    "RecordFragment",
    "format_records",
    "format_employment_history",
    "format_education_history",
    "format_training_history",
    "format_references",
    # Payloads
    "build_attachments",
    "build_contact_context",
    "build_job_application_context",
]
