from typing import Optional
from loguru import logger

from app.core.config import settings
from app.core.errors import CertificateNotFound, DuplicateIdentity
from app.db.schema import Certificate, CertificateStatus
from app.models.certificate import (
    CertificateCreate, CertificateIssued, CertificatePage, CertificateRead
)
from app.repositories.base import CertificateRepository
from .fingerprint import compute_fingerprint


class CertificateService:
    """
    Issuance and lifecycle management of certificate records.

    The fingerprint is computed exactly once, here, at issuance. Every other
    operation works with the stored hash.
    """

    def __init__(self, repository: CertificateRepository):
        """
        Args:
            repository (CertificateRepository): Storage adapter for records.
        """
        self.repository = repository

    def issue_certificate(self, data: CertificateCreate) -> CertificateIssued:
        """
        Creates a new certificate with status 'Issued'.

        Raises:
            DuplicateIdentity: If the certificate ID or identity hash is taken.
        """
        certificate_hash = compute_fingerprint(
            data.roll_number, data.certificate_id, data.issue_date)

        certificate = Certificate(
            student_name=data.student_name,
            roll_number=data.roll_number,
            certificate_id=data.certificate_id,
            issue_date=data.issue_date,
            course=data.course,
            institution=data.institution,
            certificate_hash=certificate_hash,
            status=CertificateStatus.ISSUED
        )

        try:
            certificate = self.repository.insert(certificate)
        except DuplicateIdentity as e:
            logger.warning(f"Certificate issuance rejected: {e.message}")
            raise

        logger.info(
            f"Stored certificate for {certificate.student_name}. ID: {certificate.id}")

        return CertificateIssued(
            id=certificate.id,
            certificate_hash=certificate.certificate_hash,
            message="Certificate data has been successfully stored."
        )

    def get_certificate(self, certificate_id: str) -> CertificateRead:
        certificate = self.repository.find_by_certificate_id(certificate_id)
        if not certificate:
            raise CertificateNotFound(
                "Certificate with the specified ID was not found.")
        return CertificateRead.model_validate(certificate)

    def list_certificates(self, limit: Optional[int] = None, offset: int = 0) -> CertificatePage:
        """
        Newest certificates first. `limit` is clamped to the configured
        maximum page size.
        """
        if limit is None:
            limit = settings.default_page_size
        limit = max(1, min(limit, settings.max_page_size))
        offset = max(0, offset)

        certificates = self.repository.list_recent(limit=limit, offset=offset)

        return CertificatePage(
            items=[CertificateRead.model_validate(c) for c in certificates],
            limit=limit,
            offset=offset,
            next_offset=offset + limit if len(certificates) == limit else None
        )

    def revoke_certificate(self, certificate_id: str) -> CertificateRead:
        certificate = self.repository.revoke(certificate_id)
        logger.info(f"Certificate {certificate_id} revoked")
        return CertificateRead.model_validate(certificate)

    def delete_certificate(self, certificate_id: str) -> dict:
        self.repository.delete(certificate_id)
        logger.info(
            f"Successfully deleted certificate with ID: {certificate_id}")
        return {"message": "Certificate has been successfully deleted."}
