import pytest

from app.core.config import settings
from app.core.errors import CertificateNotFound, DuplicateIdentity
from app.db.schema import CertificateStatus
from app.models.certificate import CertificateCreate
from app.services.certificate import CertificateService
from app.services.fingerprint import compute_fingerprint


def test_issue_computes_fingerprint_once(repository, scenario):
    issued = CertificateService(repository).issue_certificate(scenario)

    stored = repository.find_by_certificate_id("JHU-84321-2023")
    assert issued.certificate_hash == compute_fingerprint(
        "CS-123", "JHU-84321-2023", "2023-05-20")
    assert stored.certificate_hash == issued.certificate_hash
    assert stored.id == issued.id
    assert stored.status == CertificateStatus.ISSUED


def test_issue_duplicate(repository, scenario):
    service = CertificateService(repository)
    service.issue_certificate(scenario)

    with pytest.raises(DuplicateIdentity):
        service.issue_certificate(scenario)


def test_get_certificate_missing(repository):
    with pytest.raises(CertificateNotFound):
        CertificateService(repository).get_certificate("missing")


def test_list_certificates_clamps_limit(repository, scenario):
    service = CertificateService(repository)
    service.issue_certificate(scenario)

    page = service.list_certificates(limit=10_000)
    assert page.limit == settings.max_page_size
    assert page.next_offset is None

    default_page = service.list_certificates()
    assert default_page.limit == settings.default_page_size
    assert [c.certificate_id for c in default_page.items] == ["JHU-84321-2023"]


def test_revoke_and_delete(repository, scenario):
    service = CertificateService(repository)
    service.issue_certificate(scenario)

    assert service.revoke_certificate("JHU-84321-2023").status == CertificateStatus.REVOKED
    assert service.delete_certificate("JHU-84321-2023") == {
        "message": "Certificate has been successfully deleted."}
    with pytest.raises(CertificateNotFound):
        service.get_certificate("JHU-84321-2023")


def test_create_payload_keeps_values_verbatim():
    data = CertificateCreate(
        student_name="Aarav Sharma",
        roll_number=" cs-123",
        certificate_id="JHU-84321-2023",
        issue_date="2023-05-20",
        course="B.Sc. Computer Science",
        institution="Johns Hopkins University",
    )
    assert data.roll_number == " cs-123"
