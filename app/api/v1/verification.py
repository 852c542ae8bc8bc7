from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_verification_service
from app.services.fingerprint import compute_fingerprint
from app.services.verification import VerificationService
from app.models.verification import (
    DocumentVerificationRequest, FingerprintRead, FingerprintRequest,
    VerificationClaim, VerificationResult
)

router = APIRouter()


@router.post(
    "/fingerprint",
    response_model=FingerprintRead,
    status_code=status.HTTP_200_OK,
    summary="Compute Fingerprint",
    description="SHA-256 identity hash of roll number, certificate ID and issue date."
)
def fingerprint(data: FingerprintRequest):
    return FingerprintRead(certificate_hash=compute_fingerprint(
        data.roll_number, data.certificate_id, data.issue_date))


@router.post(
    "/",
    response_model=VerificationResult,
    status_code=status.HTTP_200_OK,
    summary="Verify Certificate",
    description="Check claimed certificate details against issued records."
)
def verify_certificate(
    claim: VerificationClaim,
    service: VerificationService = Depends(get_verification_service)
):
    """
    A failed verification is still a 200 response; inspect `verified` and
    `reason`. Non-2xx responses mean no verdict could be reached.
    """
    return service.verify(claim)


@router.post(
    "/document",
    response_model=VerificationResult,
    status_code=status.HTTP_200_OK,
    summary="Verify Certificate Document",
    description="Extract details from a certificate image and verify them."
)
def verify_document(
    data: DocumentVerificationRequest,
    service: VerificationService = Depends(get_verification_service)
):
    return service.verify_document(data.photo_data_uri)
