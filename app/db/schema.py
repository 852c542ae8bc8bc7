from datetime import datetime, timezone
import uuid
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CertificateStatus(str, Enum):
    ISSUED = "Issued"
    REVOKED = "Revoked"


class TimestampMixin(SQLModel):
    """
    Standard audit timestamps for database records, always timezone-aware UTC.
    `created_at` also defines the natural iteration order of the store.
    """
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="The exact UTC timestamp when this record was first persisted. Example: '2023-05-20 14:30:00+00:00'"
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utc_now},
        description="The exact UTC timestamp when this record was last modified. Example: '2023-05-21 09:15:00+00:00'"
    )


class Certificate(TimestampMixin, SQLModel, table=True):
    """
    One issued academic credential.

    The identity triple (roll_number, certificate_id, issue_date) is bound by
    `certificate_hash`, computed once at issuance and never recomputed on read.
    Descriptive fields (student_name, course, institution) are not part of the
    fingerprint.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="Storage-assigned identifier, distinct from the business certificate_id."
    )

    student_name: str = Field(
        description="Full name of the student. Example: 'Jane Doe'"
    )
    roll_number: str = Field(
        index=True,
        description="The student's roll number or ID. Example: 'CS-123'"
    )
    certificate_id: str = Field(
        unique=True,
        index=True,
        description="Business identifier printed on the certificate. Example: 'JHU-84321-2023'"
    )
    issue_date: str = Field(
        description="Issue date as an ISO string. Example: '2023-05-20'"
    )
    course: str = Field(
        description="The course or degree obtained. Example: 'B.Sc. Computer Science'"
    )
    institution: str = Field(
        description="Name of the issuing institution. Example: 'Johns Hopkins University'"
    )

    # Not unique at the database level; the adapters reject duplicates on insert
    certificate_hash: str = Field(
        index=True,
        max_length=64,
        description="Lowercase hex SHA-256 of roll_number + certificate_id + issue_date."
    )
    status: CertificateStatus = Field(
        default=CertificateStatus.ISSUED,
        description="Lifecycle state. Revoked certificates no longer verify."
    )
