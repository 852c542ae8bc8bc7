from typing import Optional
from loguru import logger
from pydantic import ValidationError

from app.core.errors import ExtractionFailed
from app.db.schema import Certificate, CertificateStatus
from app.models.certificate import CertificateDetails
from app.models.verification import (
    VerificationClaim, VerificationReason, VerificationResult
)
from app.repositories.base import CertificateRepository
from .extraction import ExtractionProvider
from .fingerprint import compute_fingerprint


MESSAGES = {
    VerificationReason.OK: "Certificate has been successfully verified.",
    VerificationReason.NOT_FOUND: (
        "Verification failed. The certificate hash is invalid or does not "
        "exist in our records."
    ),
    VerificationReason.DETAIL_MISMATCH: (
        "Verification failed. The hash is valid, but the certificate details "
        "(roll number, ID, or issue date) do not match our records."
    ),
    VerificationReason.REVOKED: (
        "Verification failed. This certificate has been revoked by the "
        "issuing institution."
    ),
}


def _result(reason: VerificationReason, record: Optional[Certificate] = None) -> VerificationResult:
    details = None
    if record is not None:
        details = CertificateDetails(
            student_name=record.student_name,
            course=record.course,
            institution=record.institution
        )
    return VerificationResult(
        verified=reason == VerificationReason.OK,
        reason=reason,
        message=MESSAGES[reason],
        details=details
    )


def fields_match(record: Certificate, claim: VerificationClaim) -> bool:
    return (
        record.roll_number == claim.roll_number
        and record.certificate_id == claim.certificate_id
        and record.issue_date == claim.issue_date
    )


def verify_claim(claim: VerificationClaim, records: CertificateRepository) -> VerificationResult:
    """
    Decides whether a claim corresponds to an issued, unaltered certificate.

    1. Uses the caller's hash if one was supplied, else recomputes it.
    2. Takes the first stored record with that hash.
    3. Compares all three identity fields exactly, even for a recomputed
       hash, so a supplied hash cannot vouch for fields it was not built
       from and store corruption does not pass silently.

    Storage failures propagate as `StorageUnavailable`; every other outcome
    is returned as a value.
    """
    claim_hash = claim.certificate_hash or compute_fingerprint(
        claim.roll_number, claim.certificate_id, claim.issue_date)

    record = records.find_by_hash(claim_hash)

    if record is None:
        return _result(VerificationReason.NOT_FOUND)

    if not fields_match(record, claim):
        return _result(VerificationReason.DETAIL_MISMATCH)

    if record.status == CertificateStatus.REVOKED:
        return _result(VerificationReason.REVOKED)

    return _result(VerificationReason.OK, record)


class VerificationService:
    def __init__(self, repository: CertificateRepository, extractor: Optional[ExtractionProvider] = None):
        self.repository = repository
        self.extractor = extractor

    def verify(self, claim: VerificationClaim) -> VerificationResult:
        result = verify_claim(claim, self.repository)

        if result.verified:
            logger.info(
                f"Certificate {claim.certificate_id} verified successfully")
        else:
            logger.warning(
                f"Verification of {claim.certificate_id} failed: {result.reason.value}")

        return result

    def verify_document(self, photo_data_uri: str) -> VerificationResult:
        """
        Extracts the identity fields from a certificate image and verifies
        them. The fingerprint is always recomputed from the extracted fields;
        a hash printed on the document itself is never trusted.

        Raises:
            ExtractionFailed: If no provider is configured or it cannot
                produce the three identity fields.
        """
        if self.extractor is None:
            raise ExtractionFailed(
                "Document extraction is not configured.", configured=False)

        # Providers building their own ExtractedFields can still fail validation
        try:
            fields = self.extractor.extract(photo_data_uri)
            claim = VerificationClaim(
                roll_number=fields.roll_number,
                certificate_id=fields.certificate_id,
                issue_date=fields.issue_date
            )
        except ValidationError as e:
            logger.warning(f"Extracted fields failed validation: {e.error_count()} error(s)")
            raise ExtractionFailed(
                "Extracted certificate fields are unusable.") from e
        return self.verify(claim)
