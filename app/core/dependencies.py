from typing import Optional
from fastapi import Depends, Request
from sqlmodel import Session

from app.core.config import settings
from app.db.core import get_session
from app.repositories.base import CertificateRepository
from app.repositories.sql import SqlCertificateRepository
from app.services.certificate import CertificateService
from app.services.extraction import ExtractionProvider, HttpExtractionProvider
from app.services.verification import VerificationService


def get_repository(
    request: Request,
    session: Session = Depends(get_session)
) -> CertificateRepository:
    """
    Resolves the configured storage adapter.
    The in-memory adapter lives on app.state so it survives across requests.
    """
    if settings.storage_backend == "memory":
        memory_repository = getattr(request.app.state, "memory_repository", None)
        if memory_repository is None:
            raise RuntimeError(
                "In-memory storage backend selected but no repository is configured on app.state.")
        return memory_repository
    return SqlCertificateRepository(session)


def get_extraction_provider() -> Optional[ExtractionProvider]:
    if not settings.extraction_url:
        return None
    return HttpExtractionProvider(
        url=settings.extraction_url,
        api_key=settings.extraction_api_key,
        timeout=settings.extraction_timeout
    )


def get_certificate_service(
    repository: CertificateRepository = Depends(get_repository)
) -> CertificateService:
    return CertificateService(repository)


def get_verification_service(
    repository: CertificateRepository = Depends(get_repository),
    extractor: Optional[ExtractionProvider] = Depends(get_extraction_provider)
) -> VerificationService:
    return VerificationService(repository, extractor)
