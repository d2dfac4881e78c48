"""Domain models for form submissions and notification documents."""

from .models import (
    Attachment,
    ContactSubmission,
    DocumentUpload,
    EducationRecord,
    EmploymentRecord,
    JobApplicationSubmission,
    NotificationDocument,
    ReferenceRecord,
    TrainingRecord,
)

__all__ = [
    "Attachment",
    "ContactSubmission",
    "DocumentUpload",
    "EducationRecord",
    "EmploymentRecord",
    "JobApplicationSubmission",
    "NotificationDocument",
    "ReferenceRecord",
    "TrainingRecord",
]
