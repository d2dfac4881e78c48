"""Template context and attachment builders for each form."""

import base64
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from formmail.config.models import BrandingConfig
from formmail.domain.models import Attachment, ContactSubmission, JobApplicationSubmission
from formmail.utils.timestamps import format_receipt_date, format_receipt_time, format_timestamp

from .formatters import (
    format_education_history,
    format_employment_history,
    format_references,
    format_training_history,
)

NOT_SPECIFIED = "Not specified"
NOT_PROVIDED = "Not provided"

RESUME_FILENAME = "resume.pdf"
RESUME_MIME_TYPE = "application/pdf"
DEFAULT_DOCUMENT_MIME_TYPE = "application/octet-stream"


def yes_no(flag: bool, yes: str = "Yes") -> str:
    return yes if flag else "No"


def _or(value: Optional[str], placeholder: str) -> str:
    return value if value else placeholder


def _receipt_fields(received_at: datetime) -> Dict[str, str]:
    return {
        "received_date": format_receipt_date(received_at),
        "received_time": format_receipt_time(received_at),
        "received_at": format_timestamp(received_at),
    }


def build_contact_context(
    submission: ContactSubmission,
    received_at: datetime,
    branding: Optional[BrandingConfig] = None,
) -> Dict:
    """Build the template context for a contact form submission.

    company stays None when absent so the template can omit its section.
    """
    branding = branding or BrandingConfig()

    return {
        "name": submission.name,
        "email": submission.email,
        "phone": submission.phone,
        "company": submission.company,
        "project_type": submission.project_type,
        "message": submission.message,
        "company_name": branding.company_name,
        "satisfaction_rate": branding.satisfaction_rate,
        **_receipt_fields(received_at),
    }


def build_job_application_context(
    submission: JobApplicationSubmission,
    received_at: datetime,
    attachment_names: Sequence[str] = (),
) -> Dict:
    """Build the template context for a job application.

    Optional values are replaced by placeholders here so the templates never
    need to know which fields are optional.
    """
    return {
        "job_title": submission.job_title,
        "first_name": submission.first_name,
        "last_name": submission.last_name,
        "position": {
            "job_title": submission.job_title,
            "department": _or(submission.department, NOT_SPECIFIED),
            "reference_number": _or(submission.reference_number, NOT_SPECIFIED),
            "advertisement_source": _or(submission.advertisement_source, NOT_SPECIFIED),
        },
        "applicant": {
            "full_name": " ".join(
                part
                for part in (submission.title, submission.first_name, submission.last_name)
                if part
            ),
            "email": submission.email,
            "home_address": submission.home_address,
            "zip_code": submission.zip_code,
            "home_phone": _or(submission.home_phone, NOT_PROVIDED),
            "work_phone": _or(submission.work_phone, NOT_PROVIDED),
            "mobile_phone": _or(submission.mobile_phone, NOT_PROVIDED),
            "drivers_license": yes_no(submission.has_drivers_license),
            "medical_condition": yes_no(
                submission.has_medical_condition, yes="Yes (see separate form)"
            ),
            "work_restrictions": yes_no(submission.has_work_restrictions),
            "notice_required": _or(submission.notice_required, NOT_SPECIFIED),
        },
        "employment_history": format_employment_history(submission.employment_records),
        "education_history": format_education_history(submission.education_records),
        "training_history": format_training_history(submission.training_records),
        "experience_skills": _or(submission.experience_skills, NOT_PROVIDED),
        "references": format_references(submission.references),
        "legal": {
            "criminal_convictions": yes_no(submission.has_criminal_convictions),
            "drug_alcohol_policy_acknowledged": yes_no(
                submission.drug_alcohol_policy_acknowledged
            ),
        },
        "attachment_names": list(attachment_names),
        **_receipt_fields(received_at),
    }


def build_attachments(submission: JobApplicationSubmission) -> List[Attachment]:
    """Collect the files sent with an application.

    The resume comes first, followed by additional documents in upload order.
    Documents without a filename are named document_<n>.pdf after their
    1-based position in the upload list.
    """
    attachments = []

    if submission.resume:
        attachments.append(
            Attachment(
                filename=RESUME_FILENAME,
                content=base64.b64decode(submission.resume),
                mime_type=RESUME_MIME_TYPE,
            )
        )

    for index, document in enumerate(submission.additional_documents, 1):
        attachments.append(
            Attachment(
                filename=document.filename or f"document_{index}.pdf",
                content=base64.b64decode(document.content),
                mime_type=document.mime_type or DEFAULT_DOCUMENT_MIME_TYPE,
            )
        )

    return attachments
