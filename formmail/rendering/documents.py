"""Build notification documents from validated form submissions."""

import logging
from datetime import datetime
from typing import List, Optional

from formmail.config.environment import EnvironmentConfig
from formmail.config.models import AppConfig, BrandingConfig
from formmail.domain.models import (
    ContactSubmission,
    JobApplicationSubmission,
    NotificationDocument,
)

from .exceptions import DocumentRenderError
from .payloads import build_attachments, build_contact_context, build_job_application_context
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


class DocumentRenderer:
    """Turns submissions into NotificationDocuments.

    Addressing is fixed at construction: contact messages go to the contact
    recipients with Reply-To set to the submitter, job applications go to the
    HR recipients. The receipt time is passed in by the caller so that two
    renders of the same submission at the same instant are identical.
    """

    def __init__(
        self,
        sender_email: str,
        contact_recipients: List[str],
        hr_recipients: List[str],
        sender_name: Optional[str] = None,
        branding: Optional[BrandingConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
    ):
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.contact_recipients = list(contact_recipients)
        self.hr_recipients = list(hr_recipients)
        self.branding = branding or BrandingConfig()
        self.template_renderer = template_renderer or TemplateRenderer()

    @classmethod
    def from_config(
        cls, app_config: AppConfig, env_config: EnvironmentConfig
    ) -> "DocumentRenderer":
        return cls(
            sender_email=env_config.sender_email,
            contact_recipients=env_config.contact_recipients,
            hr_recipients=env_config.hr_recipients,
            sender_name=app_config.mail.sender_name,
            branding=app_config.branding,
        )

    def render_contact(
        self, submission: ContactSubmission, received_at: datetime
    ) -> NotificationDocument:
        """Render a contact form submission.

        Raises:
            DocumentRenderError: If the templates fail to render
        """
        context = build_contact_context(submission, received_at, self.branding)
        rendered = self.template_renderer.render("contact", context)

        return NotificationDocument(
            recipients=self.contact_recipients,
            sender=self.sender_email,
            sender_name=self.sender_name,
            subject=rendered["subject"],
            html_body=rendered["html_body"],
            text_body=rendered["text_body"],
            reply_to=submission.email,
        )

    def render_job_application(
        self, submission: JobApplicationSubmission, received_at: datetime
    ) -> NotificationDocument:
        """Render a job application, attaching the resume and any documents.

        Raises:
            DocumentRenderError: If attachments cannot be decoded or the
                templates fail to render
        """
        try:
            attachments = build_attachments(submission)
        except ValueError as e:
            raise DocumentRenderError(f"Failed to decode attachments: {e}") from e

        context = build_job_application_context(
            submission, received_at, attachment_names=[a.filename for a in attachments]
        )
        rendered = self.template_renderer.render("job_application", context)

        logger.debug(
            "Rendered job application document",
            extra={
                "event": "document.rendered",
                "form": "job_application",
                "attachment_count": len(attachments),
            },
        )

        return NotificationDocument(
            recipients=self.hr_recipients,
            sender=self.sender_email,
            sender_name=self.sender_name,
            subject=rendered["subject"],
            html_body=rendered["html_body"],
            text_body=rendered["text_body"],
            attachments=attachments,
        )
