"""HTTP-level tests for the form endpoints using FastAPI's TestClient.

Tests cover:
- Success and failure responses for both forms
- 400 responses for invalid payloads before any send
- Fixed-window rate limiting across endpoints (429 with Retry-After)
- Health endpoint, CORS and transport shutdown
"""

import base64
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from formmail.api.app import create_app, summarize_validation_errors
from formmail.api.rate_limit import FixedWindowRateLimiter
from formmail.config.environment import EnvironmentConfig
from formmail.config.models import AppConfig
from formmail.rendering.documents import DocumentRenderer
from formmail.submissions.service import SubmissionService
from formmail.transports.exceptions import TransportError, TransportErrorKind

from tests.helpers import RecordingTransport, contact_payload, job_application_payload

RATE_LIMIT_MESSAGE = "Too many emails sent from this IP, please try again later."


@pytest.fixture
def env_config():
    return EnvironmentConfig(
        sender_email="no-reply@example.com",
        contact_email="info@example.com",
        hr_email="hr@example.com",
        sendgrid_api_key="SG.key",
    )


@pytest.fixture
def transport():
    return RecordingTransport()


def build_client(transport, env_config, app_config=None, rate_limiter=None):
    app_config = app_config or AppConfig()
    renderer = DocumentRenderer.from_config(app_config, env_config)
    service = SubmissionService(
        transport=transport,
        renderer=renderer,
        clock=lambda: datetime(2025, 3, 4, 9, 30, tzinfo=timezone.utc),
    )
    app = create_app(service, app_config, env_config, rate_limiter=rate_limiter)
    return TestClient(app)


@pytest.fixture
def client(transport, env_config):
    return build_client(transport, env_config)


class TestContactEndpoint:
    def test_success(self, client, transport):
        response = client.post("/api/contact", json=contact_payload())

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Message sent successfully!"}
        assert len(transport.sent) == 1
        assert transport.sent[0].subject == "Contact Form: Electrical Project"

    def test_transport_failure_returns_generic_500(self, env_config):
        error = TransportError(
            TransportErrorKind.NETWORK, "Could not connect to SendGrid", diagnostic="ECONNRESET"
        )
        client = build_client(RecordingTransport(error=error), env_config)

        response = client.post("/api/contact", json=contact_payload())

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to send message"}
        assert "ECONNRESET" not in response.text

    def test_missing_required_field_is_400(self, client, transport):
        payload = contact_payload()
        del payload["email"]

        response = client.post("/api/contact", json=payload)

        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["message"].startswith("Invalid submission: ")
        assert "email" in body["message"]
        assert transport.sent == []

    def test_invalid_email_is_400(self, client, transport):
        response = client.post("/api/contact", json=contact_payload(email="not-an-email"))

        assert response.status_code == 400
        assert "email" in response.json()["message"]
        assert transport.sent == []

    def test_snake_case_fields_accepted(self, client, transport):
        payload = contact_payload()
        payload["project_type"] = payload.pop("projectType")

        response = client.post("/api/contact", json=payload)

        assert response.status_code == 200

    def test_script_is_escaped_in_sent_html(self, client, transport):
        client.post("/api/contact", json=contact_payload(message="<script>alert(1)</script>"))

        assert "&lt;script&gt;" in transport.sent[0].html_body
        assert "<script>alert(1)</script>" not in transport.sent[0].html_body


class TestJobApplicationEndpoint:
    def test_success_with_attachments(self, client, transport):
        resume = base64.b64encode(b"%PDF resume").decode("ascii")
        extra = base64.b64encode(b"certificate").decode("ascii")
        payload = job_application_payload(
            resume=resume,
            additionalDocuments=[{"filename": "x.pdf", "content": extra, "type": "application/pdf"}],
        )

        response = client.post("/api/job-application", json=payload)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Application submitted successfully!",
        }
        assert [a.filename for a in transport.sent[0].attachments] == ["resume.pdf", "x.pdf"]

    def test_failure_message(self, env_config):
        error = TransportError(TransportErrorKind.AUTHENTICATION, "HTTP 401")
        client = build_client(RecordingTransport(error=error), env_config)

        response = client.post("/api/job-application", json=job_application_payload())

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to submit application. Please try again."

    def test_invalid_base64_attachment_is_400(self, client, transport):
        payload = job_application_payload(resume="!!!not base64!!!")

        response = client.post("/api/job-application", json=payload)

        assert response.status_code == 400
        assert "resume" in response.json()["message"]
        assert transport.sent == []


class TestRateLimiting:
    def test_sixth_request_is_rejected_without_calling_handler(self, client, transport):
        responses = [client.post("/api/contact", json=contact_payload()) for _ in range(6)]

        assert [r.status_code for r in responses] == [200] * 5 + [429]
        assert responses[5].json() == {"success": False, "message": RATE_LIMIT_MESSAGE}
        assert int(responses[5].headers["Retry-After"]) > 0
        assert len(transport.sent) == 5

    def test_limit_is_shared_across_endpoints(self, client, transport):
        for _ in range(5):
            client.post("/api/contact", json=contact_payload())

        response = client.post("/api/job-application", json=job_application_payload())

        assert response.status_code == 429
        assert len(transport.sent) == 5

    def test_health_is_not_rate_limited(self, client):
        for _ in range(6):
            client.post("/api/contact", json=contact_payload())

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_custom_limiter(self, transport, env_config):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)
        client = build_client(transport, env_config, rate_limiter=limiter)

        assert client.post("/api/contact", json=contact_payload()).status_code == 200
        assert client.post("/api/contact", json=contact_payload()).status_code == 429

    def test_disabled_rate_limit(self, transport, env_config):
        app_config = AppConfig.model_validate({"rate_limit": {"enabled": False}})
        client = build_client(transport, env_config, app_config=app_config)

        statuses = {client.post("/api/contact", json=contact_payload()).status_code for _ in range(8)}

        assert statuses == {200}


def test_cors_preflight_allows_frontend(client):
    response = client.options(
        "/api/contact",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_lifespan_closes_transport(transport, env_config):
    with build_client(transport, env_config) as client:
        assert client.get("/health").status_code == 200
        assert transport.closed is False

    assert transport.closed is True


def test_summarize_validation_errors():
    errors = [
        {"loc": ("body", "email"), "msg": "Field required"},
        {"loc": ("body", "phone"), "msg": "Field required"},
        {"loc": ("body", "references", 0, "name"), "msg": "Input should be a valid string"},
        {"loc": ("body", "message"), "msg": "Field required"},
    ]

    summary = summarize_validation_errors(errors)

    assert summary == (
        "email: Field required; phone: Field required; "
        "references.0.name: Input should be a valid string; and 1 more"
    )
