import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from app.db.schema import CertificateStatus


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def ensure_not_blank(value: str) -> str:
    """
    Rejects whitespace-only values without altering the accepted ones.
    Identity fields are hashed byte-for-byte, so no trimming happens here.
    """
    if not value.strip():
        raise ValueError("Field must not be blank.")
    return value


class CertificateCreate(SQLModel):
    """
    Payload for issuing a certificate.
    """
    student_name: str = Field(min_length=1, max_length=150,
                              description="Full name of the student")
    roll_number: str = Field(min_length=1, max_length=64,
                             description="Roll number or student ID")
    certificate_id: str = Field(min_length=1, max_length=100,
                                description="Unique certificate ID (e.g. JHU-84321-2023)")
    issue_date: str = Field(description="Issue date (YYYY-MM-DD)")
    course: str = Field(min_length=1, max_length=150,
                        description="Course or degree obtained")
    institution: str = Field(min_length=1, max_length=150,
                             description="Issuing institution")

    @field_validator("student_name", "roll_number", "certificate_id", "course", "institution")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return ensure_not_blank(v)

    @field_validator("issue_date")
    @classmethod
    def iso_date(cls, v: str) -> str:
        if not ISO_DATE_PATTERN.match(v):
            raise ValueError("Issue date must be formatted as YYYY-MM-DD.")
        try:
            datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError(f"'{v}' is not a valid calendar date.")
        return v


class CertificateRead(SQLModel):
    """
    Response model.
    """
    id: UUID
    student_name: str
    roll_number: str
    certificate_id: str
    issue_date: str
    course: str
    institution: str
    certificate_hash: str
    status: CertificateStatus
    created_at: datetime


class CertificateIssued(SQLModel):
    success: bool = True
    id: UUID
    certificate_hash: str
    message: str


class CertificateDetails(SQLModel):
    """Read-only projection returned on a successful verification."""
    student_name: str
    course: str
    institution: str


class CertificatePage(SQLModel):
    items: List[CertificateRead]
    limit: int
    offset: int
    next_offset: Optional[int] = Field(
        default=None, description="Offset of the next page, if there may be one.")
