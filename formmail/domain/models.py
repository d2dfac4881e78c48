"""Domain models for form submissions and rendered notification documents.

This module defines the request-scoped values that flow through the service:
- ContactSubmission / JobApplicationSubmission: validated form payloads
- EmploymentRecord, EducationRecord, TrainingRecord, ReferenceRecord: repeated
  sub-records of a job application
- DocumentUpload: an additional document attached to an application
- Attachment / NotificationDocument: the transport-neutral email to send

Payload field names arrive in camelCase from the website and are exposed as
snake_case attributes.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,", re.IGNORECASE)


def normalize_base64(value: str) -> str:
    """Strip an optional data URL prefix and whitespace from base64 text.

    Raises:
        ValueError: If the remaining text is not valid base64
    """
    cleaned = _DATA_URL_PREFIX.sub("", value.strip())
    cleaned = re.sub(r"\s+", "", cleaned)
    if not cleaned:
        raise ValueError("Attachment content cannot be empty")
    try:
        base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Attachment content must be base64 encoded") from e
    return cleaned


class FormModel(BaseModel):
    """Base for payload models: camelCase aliases, trimmed strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )


class FormRecord(FormModel):
    """Base for repeated sub-records. Every field is an optional string."""

    @field_validator("*", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Browsers send null for untouched inputs."""
        return "" if v is None else v


class EmploymentRecord(FormRecord):
    """One previous employer. Rendered only when employer is filled in."""

    employer: str = ""
    job_title: str = ""
    address: str = ""
    from_date: str = ""
    to_date: str = ""
    duties: str = ""
    reason_for_leaving: str = ""


class EducationRecord(FormRecord):
    """One qualification. Rendered only when institution is filled in."""

    institution: str = ""
    subject: str = ""
    qualification: str = ""
    date_gained: str = ""


class TrainingRecord(FormRecord):
    """One training course. Rendered only when course is filled in."""

    course: str = ""
    date: str = ""


class ReferenceRecord(FormRecord):
    """One referee. Rendered only when name is filled in."""

    name: str = ""
    position: str = ""
    organization: str = ""
    address: str = ""
    telephone: str = ""


class DocumentUpload(FormModel):
    """An additional document uploaded with an application."""

    filename: Optional[str] = None
    content: str = Field(..., description="Base64 encoded file content")
    mime_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("type", "mimeType", "mime_type")
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return normalize_base64(v)

    @field_validator("filename", "mime_type")
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ContactSubmission(FormModel):
    """Payload of the website contact form."""

    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    company: Optional[str] = None
    project_type: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    @field_validator("company")
    @classmethod
    def blank_company_as_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class JobApplicationSubmission(FormModel):
    """Payload of the job application form."""

    # Position details
    job_title: str = Field(..., min_length=1)
    department: Optional[str] = None
    reference_number: Optional[str] = None
    advertisement_source: Optional[str] = None

    # Personal details
    title: str = ""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    home_address: str = ""
    zip_code: str = ""
    home_phone: Optional[str] = None
    work_phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    email: EmailStr

    # Additional info
    has_drivers_license: bool = False
    has_medical_condition: bool = False
    has_work_restrictions: bool = False
    notice_required: Optional[str] = None

    employment_records: List[EmploymentRecord] = Field(default_factory=list)
    education_records: List[EducationRecord] = Field(default_factory=list)
    training_records: List[TrainingRecord] = Field(default_factory=list)
    experience_skills: Optional[str] = None
    references: List[ReferenceRecord] = Field(default_factory=list)

    # Legal
    has_criminal_convictions: bool = False
    drug_alcohol_policy_acknowledged: bool = False

    # Optional attachments
    resume: Optional[str] = Field(None, description="Base64 encoded PDF")
    additional_documents: List[DocumentUpload] = Field(default_factory=list)

    @field_validator("title", "home_address", "zip_code", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator(
        "has_drivers_license",
        "has_medical_condition",
        "has_work_restrictions",
        "has_criminal_convictions",
        "drug_alcohol_policy_acknowledged",
        mode="before",
    )
    @classmethod
    def none_as_false(cls, v):
        return False if v is None else v

    @field_validator(
        "employment_records",
        "education_records",
        "training_records",
        "references",
        "additional_documents",
        mode="before",
    )
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator(
        "department",
        "reference_number",
        "advertisement_source",
        "home_phone",
        "work_phone",
        "mobile_phone",
        "notice_required",
        "experience_skills",
    )
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("resume")
    @classmethod
    def validate_resume(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return normalize_base64(v)

    @property
    def applicant_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Attachment:
    """A file attached to a notification document. content holds raw bytes."""

    filename: str
    content: bytes
    mime_type: str = "application/octet-stream"
    disposition: str = "attachment"

    def content_base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    @property
    def maintype(self) -> str:
        return self.mime_type.split("/", 1)[0] if "/" in self.mime_type else "application"

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/", 1)[1] if "/" in self.mime_type else "octet-stream"


@dataclass
class NotificationDocument:
    """A rendered email ready for a mail transport.

    Attributes:
        recipients: To addresses
        sender: From address
        subject: Single-line subject
        html_body: HTML body with every submitted value escaped
        text_body: Plain text alternative
        sender_name: Optional display name for the From header
        attachments: Files in the order they should appear
        reply_to: Optional Reply-To address
    """

    recipients: List[str]
    sender: str
    subject: str
    html_body: str
    text_body: str
    sender_name: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)
    reply_to: Optional[str] = None
