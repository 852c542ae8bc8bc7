from contextlib import contextmanager
from typing import Iterator, List, Optional
from uuid import UUID
from loguru import logger
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError, TimeoutError
)
from sqlmodel import Session, select, or_

from app.core.errors import CertificateNotFound, DuplicateIdentity, StorageUnavailable
from app.db.schema import Certificate, CertificateStatus
from .base import CertificateRepository


def is_connectivity_error(error: SQLAlchemyError) -> bool:
    """
    True for failures to reach the database (refused or dropped connections,
    pool exhaustion). Statement, bind and programming errors are bugs, not
    outages, and must not be reported as such.
    """
    if isinstance(error, (OperationalError, TimeoutError)):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


class SqlCertificateRepository(CertificateRepository):
    """
    SQLModel adapter. Hash lookups go through the `certificate_hash` index
    instead of scanning.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _storage_errors(self, action: str, rollback: bool = False):
        try:
            yield
        except SQLAlchemyError as e:
            if rollback:
                self.session.rollback()
            if isinstance(e, IntegrityError):
                raise
            if is_connectivity_error(e):
                logger.error(f"Certificate {action} failed, storage unreachable: {e}")
                raise StorageUnavailable("Certificate storage is unavailable.") from e
            logger.exception(f"Certificate {action} failed")
            raise

    def _first(self, statement) -> Optional[Certificate]:
        with self._storage_errors("lookup"):
            return self.session.exec(statement).first()

    def _commit(self, action: str):
        with self._storage_errors(action, rollback=True):
            self.session.commit()

    def iter_all(self) -> Iterator[Certificate]:
        statement = select(Certificate).order_by(
            Certificate.created_at.asc(), Certificate.id.asc())
        with self._storage_errors("scan"):
            return iter(self.session.exec(statement).all())

    def find_by_hash(self, certificate_hash: str) -> Optional[Certificate]:
        statement = (
            select(Certificate)
            .where(Certificate.certificate_hash == certificate_hash)
            .order_by(Certificate.created_at.asc(), Certificate.id.asc())
        )
        return self._first(statement)

    def find_by_certificate_id(self, certificate_id: str) -> Optional[Certificate]:
        statement = select(Certificate).where(
            Certificate.certificate_id == certificate_id)
        return self._first(statement)

    def get(self, record_id: UUID) -> Optional[Certificate]:
        with self._storage_errors("lookup"):
            return self.session.get(Certificate, record_id)

    def insert(self, certificate: Certificate) -> Certificate:
        # 1. Check both identity keys before writing
        existing = self._first(
            select(Certificate).where(
                or_(
                    Certificate.certificate_id == certificate.certificate_id,
                    Certificate.certificate_hash == certificate.certificate_hash
                )
            )
        )
        if existing:
            if existing.certificate_id == certificate.certificate_id:
                raise DuplicateIdentity(
                    f"Certificate ID '{certificate.certificate_id}' has already been issued.")
            raise DuplicateIdentity(
                "A certificate with the same roll number, ID and issue date already exists.")

        # 2. Write; the unique index on certificate_id catches concurrent inserts
        self.session.add(certificate)
        try:
            self._commit("insert")
        except IntegrityError as e:
            logger.warning(f"Certificate insert rejected by constraint: {e}")
            raise DuplicateIdentity(
                f"Certificate ID '{certificate.certificate_id}' has already been issued.") from e

        with self._storage_errors("refresh"):
            self.session.refresh(certificate)
        return certificate

    def revoke(self, certificate_id: str) -> Certificate:
        certificate = self.find_by_certificate_id(certificate_id)
        if not certificate:
            raise CertificateNotFound(
                f"Certificate '{certificate_id}' was not found.")

        certificate.status = CertificateStatus.REVOKED
        self.session.add(certificate)
        self._commit("revocation")
        with self._storage_errors("refresh"):
            self.session.refresh(certificate)
        return certificate

    def delete(self, certificate_id: str) -> None:
        certificate = self.find_by_certificate_id(certificate_id)
        if not certificate:
            raise CertificateNotFound(
                f"Certificate '{certificate_id}' was not found.")

        self.session.delete(certificate)
        self._commit("deletion")

    def list_recent(self, limit: int, offset: int = 0) -> List[Certificate]:
        # id breaks created_at ties so offset pages never overlap
        statement = (
            select(Certificate)
            .order_by(Certificate.created_at.desc(), Certificate.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._storage_errors("listing"):
            return list(self.session.exec(statement).all())
