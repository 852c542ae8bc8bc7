from abc import ABC, abstractmethod
from typing import Iterator, List, Optional
from uuid import UUID

from app.db.schema import Certificate


class CertificateRepository(ABC):
    """
    Storage port for certificate records.

    Adapters own their storage and always hand back the canonical
    `Certificate` model. Failures to reach the backing store are raised as
    `StorageUnavailable`, never reported as a missing record.
    """

    @abstractmethod
    def iter_all(self) -> Iterator[Certificate]:
        """Yields every record in the store's natural iteration order."""

    def find_by_hash(self, certificate_hash: str) -> Optional[Certificate]:
        """
        Returns the first record carrying `certificate_hash`, or None.

        Stores without an index fall back to a linear scan. When duplicates
        exist, whichever record the store yields first wins.
        """
        return next(
            (c for c in self.iter_all() if c.certificate_hash == certificate_hash),
            None
        )

    @abstractmethod
    def find_by_certificate_id(self, certificate_id: str) -> Optional[Certificate]:
        ...

    @abstractmethod
    def get(self, record_id: UUID) -> Optional[Certificate]:
        ...

    @abstractmethod
    def insert(self, certificate: Certificate) -> Certificate:
        """
        Persists a new record.

        Raises:
            DuplicateIdentity: If the certificate_id or certificate_hash is
                already present.
        """

    @abstractmethod
    def revoke(self, certificate_id: str) -> Certificate:
        """
        Marks the record as revoked and returns it.

        Raises:
            CertificateNotFound: If no record has this certificate_id.
        """

    @abstractmethod
    def delete(self, certificate_id: str) -> None:
        """
        Raises:
            CertificateNotFound: If no record has this certificate_id.
        """

    @abstractmethod
    def list_recent(self, limit: int, offset: int = 0) -> List[Certificate]:
        """Newest first."""
