"""Unit tests for notification template rendering.

Tests the TemplateRenderer for:
- Subject, HTML, and text template rendering for both forms
- HTML auto-escaping of submitted values
- Single-line subjects
- Strict undefined variable detection
"""

from datetime import datetime, timezone

import pytest

from formmail.domain.models import ContactSubmission
from formmail.rendering.exceptions import DocumentRenderError
from formmail.rendering.payloads import build_contact_context
from formmail.rendering.templates import TemplateRenderer

from tests.helpers import contact_payload

RECEIVED_AT = datetime(2025, 3, 4, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def renderer():
    return TemplateRenderer()


@pytest.fixture
def contact_context():
    submission = ContactSubmission.model_validate(contact_payload())
    return build_contact_context(submission, RECEIVED_AT)


def test_render_returns_all_three_components(renderer, contact_context):
    result = renderer.render("contact", contact_context)

    assert set(result) == {"subject", "html_body", "text_body"}
    assert all(isinstance(v, str) and v for v in result.values())


def test_contact_subject(renderer, contact_context):
    result = renderer.render("contact", contact_context)
    assert result["subject"] == "Contact Form: Electrical Project"


def test_subject_is_single_line(renderer, contact_context):
    contact_context["project_type"] = "Solar\r\nBcc: victim@example.com"

    result = renderer.render("contact", contact_context)

    assert "\n" not in result["subject"]
    assert "\r" not in result["subject"]
    assert result["subject"] == "Contact Form: Solar Bcc: victim@example.com Project"


def test_subject_is_not_html_escaped(renderer, contact_context):
    contact_context["project_type"] = "Kitchen & Bath"

    result = renderer.render("contact", contact_context)

    assert result["subject"] == "Contact Form: Kitchen & Bath Project"


def test_html_body_escapes_script_tags(renderer, contact_context):
    contact_context["message"] = "<script>alert('x')</script>"

    result = renderer.render("contact", contact_context)

    assert "<script>" not in result["html_body"]
    assert "&lt;script&gt;" in result["html_body"]


def test_text_body_is_not_escaped(renderer, contact_context):
    contact_context["message"] = "Fish & chips <3"

    result = renderer.render("contact", contact_context)

    assert "Fish & chips <3" in result["text_body"]


def test_company_name_in_subtitle(renderer, contact_context):
    result = renderer.render("contact", contact_context)
    assert "C&amp;C Construction &amp; Electrical" in result["html_body"]


def test_unknown_form_raises(renderer, contact_context):
    with pytest.raises(DocumentRenderError, match="Unknown form"):
        renderer.render("newsletter", contact_context)


def test_missing_variable_raises(renderer, contact_context):
    del contact_context["message"]

    with pytest.raises(DocumentRenderError, match="Template rendering failed for contact"):
        renderer.render("contact", contact_context)
