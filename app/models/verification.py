import re
from enum import Enum
from typing import Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from app.models.certificate import CertificateDetails, ensure_not_blank


HEX_DIGEST_PATTERN = re.compile(r"^[0-9a-f]{64}$")

ROLL_NUMBER_MAX_LENGTH = 64
CERTIFICATE_ID_MAX_LENGTH = 100
ISSUE_DATE_MAX_LENGTH = 32


class VerificationReason(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    DETAIL_MISMATCH = "detail_mismatch"
    REVOKED = "revoked"


class FingerprintRequest(SQLModel):
    roll_number: str
    certificate_id: str
    issue_date: str


class FingerprintRead(SQLModel):
    certificate_hash: str


class VerificationClaim(SQLModel):
    """
    Fields a verifier asserts belong to a genuine certificate.

    `certificate_hash` is optional. When supplied it is used for the lookup
    instead of the recomputed fingerprint, and the exact field comparison
    decides whether the claim actually belongs to it.
    """
    roll_number: str = Field(min_length=1, max_length=ROLL_NUMBER_MAX_LENGTH)
    certificate_id: str = Field(min_length=1, max_length=CERTIFICATE_ID_MAX_LENGTH)
    issue_date: str = Field(min_length=1, max_length=ISSUE_DATE_MAX_LENGTH)
    certificate_hash: Optional[str] = Field(
        default=None,
        description="Pre-computed fingerprint (64 lowercase hex characters)."
    )

    @field_validator("roll_number", "certificate_id", "issue_date")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return ensure_not_blank(v)

    @field_validator("certificate_hash")
    @classmethod
    def hex_digest(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not HEX_DIGEST_PATTERN.match(v):
            raise ValueError(
                "Certificate hash must be 64 lowercase hexadecimal characters.")
        return v


class VerificationResult(SQLModel):
    verified: bool
    reason: VerificationReason
    message: str
    details: Optional[CertificateDetails] = None


class DocumentVerificationRequest(SQLModel):
    photo_data_uri: str = Field(
        min_length=1,
        description="Certificate image as 'data:<mimetype>;base64,<encoded_data>'."
    )


class ExtractedFields(SQLModel):
    """
    Identity fields returned by the document extraction provider.
    Limits match `VerificationClaim` so extracted values always form a claim.
    """
    roll_number: str = Field(min_length=1, max_length=ROLL_NUMBER_MAX_LENGTH)
    certificate_id: str = Field(min_length=1, max_length=CERTIFICATE_ID_MAX_LENGTH)
    issue_date: str = Field(min_length=1, max_length=ISSUE_DATE_MAX_LENGTH)
