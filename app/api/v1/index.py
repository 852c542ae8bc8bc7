from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.core.dependencies import get_repository
from app.core.errors import StorageUnavailable
from app.repositories.base import CertificateRepository

router = APIRouter()


@router.get("/", status_code=status.HTTP_200_OK)
def index():
    return {"status": "API is running"}


@router.get("/readiness", status_code=status.HTTP_200_OK)
def readiness_check(repository: CertificateRepository = Depends(get_repository)):
    try:
        repository.list_recent(limit=1)
    except StorageUnavailable:
        logger.exception("Storage readiness check failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage not ready"
        )

    return {"status": "ready", "storage": "online"}
