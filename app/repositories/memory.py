from typing import Iterable, Iterator, List, Optional
from uuid import UUID
from loguru import logger

from app.core.errors import CertificateNotFound, DuplicateIdentity
from app.db.schema import Certificate, CertificateStatus, utc_now
from .base import CertificateRepository


class InMemoryCertificateRepository(CertificateRepository):
    """
    List-backed adapter. Each instance owns its records; nothing is shared
    between instances. Lookups by hash use the inherited linear scan.
    """

    def __init__(self, certificates: Optional[Iterable[Certificate]] = None):
        self._certificates: List[Certificate] = []
        for certificate in certificates or ():
            self.insert(certificate)

    def __len__(self) -> int:
        return len(self._certificates)

    def iter_all(self) -> Iterator[Certificate]:
        return iter(list(self._certificates))

    def find_by_certificate_id(self, certificate_id: str) -> Optional[Certificate]:
        return next(
            (c for c in self._certificates if c.certificate_id == certificate_id),
            None
        )

    def get(self, record_id: UUID) -> Optional[Certificate]:
        return next((c for c in self._certificates if c.id == record_id), None)

    def insert(self, certificate: Certificate) -> Certificate:
        if self.find_by_certificate_id(certificate.certificate_id):
            raise DuplicateIdentity(
                f"Certificate ID '{certificate.certificate_id}' has already been issued.")
        if self.find_by_hash(certificate.certificate_hash):
            raise DuplicateIdentity(
                "A certificate with the same roll number, ID and issue date already exists.")

        self._certificates.append(certificate)
        logger.debug(f"Stored certificate {certificate.id} in memory")
        return certificate

    def revoke(self, certificate_id: str) -> Certificate:
        certificate = self.find_by_certificate_id(certificate_id)
        if not certificate:
            raise CertificateNotFound(
                f"Certificate '{certificate_id}' was not found.")

        certificate.status = CertificateStatus.REVOKED
        certificate.updated_at = utc_now()
        return certificate

    def delete(self, certificate_id: str) -> None:
        certificate = self.find_by_certificate_id(certificate_id)
        if not certificate:
            raise CertificateNotFound(
                f"Certificate '{certificate_id}' was not found.")

        self._certificates.remove(certificate)

    def list_recent(self, limit: int, offset: int = 0) -> List[Certificate]:
        # Reversed insertion order keeps ties on created_at stable
        newest_first = sorted(
            reversed(self._certificates),
            key=lambda c: c.created_at,
            reverse=True
        )
        return newest_first[offset:offset + limit]
