"""Record formatters for the repeated sections of a job application.

Applicants often leave trailing rows of a repeated section empty. Each record
kind has a presence key (employer, institution, course, name); rows whose
presence key is blank are dropped before rendering. Dropping is a display
filter, never an error.

Numbered kinds are labelled after filtering, so the first filled-in employer
is always "Employment 1" even when the row above it was left empty.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

FieldAccessor = Union[str, Callable[[Any], str]]
FieldSpec = Tuple[str, FieldAccessor]


@dataclass(frozen=True)
class RecordFragment:
    """One record prepared for display.

    Attributes:
        label: Numbered heading such as "Reference 2", or None for table rows
        fields: Ordered (heading, value) pairs
    """

    label: Optional[str]
    fields: Tuple[Tuple[str, str], ...]

    @property
    def values(self) -> Tuple[str, ...]:
        return tuple(value for _, value in self.fields)


def _read(record: Any, key: str) -> str:
    if isinstance(record, Mapping):
        value = record.get(key)
    else:
        value = getattr(record, key, None)
    return "" if value is None else str(value)


def _employment_period(record: Any) -> str:
    return f"{_read(record, 'from_date')} to {_read(record, 'to_date')}"


EMPLOYMENT_FIELDS: Tuple[FieldSpec, ...] = (
    ("Employer", "employer"),
    ("Job Title", "job_title"),
    ("Address", "address"),
    ("Period", _employment_period),
    ("Duties", "duties"),
    ("Reason for Leaving", "reason_for_leaving"),
)

EDUCATION_FIELDS: Tuple[FieldSpec, ...] = (
    ("Institution", "institution"),
    ("Subject", "subject"),
    ("Qualification", "qualification"),
    ("Date", "date_gained"),
)

TRAINING_FIELDS: Tuple[FieldSpec, ...] = (
    ("Course", "course"),
    ("Date", "date"),
)

REFERENCE_FIELDS: Tuple[FieldSpec, ...] = (
    ("Name", "name"),
    ("Position", "position"),
    ("Organization", "organization"),
    ("Address", "address"),
    ("Telephone", "telephone"),
)


def is_present(record: Any, presence_key: str) -> bool:
    """Return True when the record's presence key holds non-blank text."""
    return bool(_read(record, presence_key).strip())


def format_records(
    records: Optional[Sequence[Any]],
    presence_key: str,
    fields: Sequence[FieldSpec],
    label_prefix: Optional[str] = None,
) -> List[RecordFragment]:
    """Filter records on their presence key and build display fragments.

    Args:
        records: Records in submission order (models or mappings)
        presence_key: Attribute that must be non-blank for a record to render
        fields: (heading, accessor) pairs; an accessor is an attribute name or
            a callable taking the record
        label_prefix: When given, fragments are labelled "<prefix> <n>" with n
            counting included records from 1

    Returns:
        One fragment per included record, in input order
    """
    included = [record for record in records or () if is_present(record, presence_key)]

    fragments = []
    for number, record in enumerate(included, 1):
        values = tuple(
            (heading, accessor(record) if callable(accessor) else _read(record, accessor))
            for heading, accessor in fields
        )
        label = f"{label_prefix} {number}" if label_prefix else None
        fragments.append(RecordFragment(label=label, fields=values))

    return fragments


def format_employment_history(records: Optional[Sequence[Any]]) -> List[RecordFragment]:
    return format_records(records, "employer", EMPLOYMENT_FIELDS, label_prefix="Employment")


def format_education_history(records: Optional[Sequence[Any]]) -> List[RecordFragment]:
    return format_records(records, "institution", EDUCATION_FIELDS)


def format_training_history(records: Optional[Sequence[Any]]) -> List[RecordFragment]:
    return format_records(records, "course", TRAINING_FIELDS)


def format_references(records: Optional[Sequence[Any]]) -> List[RecordFragment]:
    return format_records(records, "name", REFERENCE_FIELDS, label_prefix="Reference")
