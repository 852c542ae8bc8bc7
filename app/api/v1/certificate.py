from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_certificate_service
from app.services.certificate import CertificateService
from app.models.certificate import (
    CertificateCreate, CertificateIssued, CertificatePage, CertificateRead
)

router = APIRouter()


@router.post(
    "/",
    response_model=CertificateIssued,
    status_code=status.HTTP_201_CREATED,
    summary="Issue Certificate",
    description="Record a new certificate and compute its identity hash."
)
def issue_certificate(
    data: CertificateCreate,
    service: CertificateService = Depends(get_certificate_service)
):
    return service.issue_certificate(data)


@router.get(
    "/",
    response_model=CertificatePage,
    status_code=status.HTTP_200_OK,
    summary="List Certificates",
    description="Most recently issued certificates first."
)
def list_certificates(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: CertificateService = Depends(get_certificate_service)
):
    return service.list_certificates(limit=limit, offset=offset)


@router.get(
    "/{certificate_id}",
    response_model=CertificateRead,
    status_code=status.HTTP_200_OK,
    summary="Get Certificate",
    description="Fetch a certificate by its business ID."
)
def get_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service)
):
    return service.get_certificate(certificate_id)


@router.post(
    "/{certificate_id}/revoke",
    response_model=CertificateRead,
    status_code=status.HTTP_200_OK,
    summary="Revoke Certificate",
    description="Mark a certificate as revoked so it no longer verifies."
)
def revoke_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service)
):
    return service.revoke_certificate(certificate_id)


@router.delete(
    "/{certificate_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete Certificate",
    description="Permanently remove a certificate record."
)
def delete_certificate(
    certificate_id: str,
    service: CertificateService = Depends(get_certificate_service)
):
    return service.delete_certificate(certificate_id)
