"""Template rendering for notification emails using Jinja2.

HTML templates are autoescaped so every submitted value is inserted as text,
never as markup. Subject and plain-text templates are not escaped.
"""

import logging
from typing import Dict

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from .exceptions import DocumentRenderError

logger = logging.getLogger(__name__)

FORMS = ("contact", "job_application")


class TemplateRenderer:
    """Renders the subject, HTML body and text body for a form.

    Each form has three templates in the email_templates package directory:
    <form>_subject.j2, <form>_body.html.j2 and <form>_body.txt.j2.
    Templates are cached by the Jinja2 environment after first use.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within the formmail.rendering package
        """
        self.env = Environment(
            loader=PackageLoader("formmail.rendering", template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("html.j2", "html"),
                default_for_string=True,
                default=False,
            ),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, form: str, context: Dict) -> Dict[str, str]:
        """Render all templates for a form.

        Args:
            form: Form name ("contact" or "job_application")
            context: Template variables

        Returns:
            Dictionary with "subject" (single line), "html_body" and "text_body"

        Raises:
            DocumentRenderError: If the form is unknown or a template fails
        """
        if form not in FORMS:
            raise DocumentRenderError(f"Unknown form: {form}")

        try:
            subject = self.env.get_template(f"{form}_subject.j2").render(context)
            html_body = self.env.get_template(f"{form}_body.html.j2").render(context)
            text_body = self.env.get_template(f"{form}_body.txt.j2").render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for {form}: {e}"
            logger.error(error_msg, exc_info=True)
            raise DocumentRenderError(error_msg) from e

        return {
            # Header injection guard: subjects are always one line
            "subject": " ".join(subject.split()),
            "html_body": html_body,
            "text_body": text_body,
        }
