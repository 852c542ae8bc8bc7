from unittest.mock import MagicMock

import pytest

from app.core.errors import ExtractionFailed, StorageUnavailable
from app.models.verification import ExtractedFields, VerificationClaim, VerificationReason
from app.repositories.base import CertificateRepository
from app.services.certificate import CertificateService
from app.services.extraction import ExtractionProvider
from app.services.fingerprint import compute_fingerprint
from app.services.verification import VerificationService, verify_claim


class StaticExtractor(ExtractionProvider):
    def __init__(self, fields=None, error=None):
        self.fields = fields
        self.error = error
        self.calls = 0

    def extract(self, photo_data_uri):
        self.calls += 1
        if self.error:
            raise self.error
        return self.fields


@pytest.fixture(name="issued")
def issued_fixture(repository, scenario):
    CertificateService(repository).issue_certificate(scenario)
    return repository


def claim(**overrides) -> VerificationClaim:
    fields = {
        "roll_number": "CS-123",
        "certificate_id": "JHU-84321-2023",
        "issue_date": "2023-05-20",
    }
    fields.update(overrides)
    return VerificationClaim(**fields)


def test_round_trip_verifies_with_details(issued):
    result = verify_claim(claim(), issued)

    assert result.verified is True
    assert result.reason == VerificationReason.OK
    assert result.message == "Certificate has been successfully verified."
    assert result.details.student_name == "Aarav Sharma"
    assert result.details.course == "B.Sc. Computer Science"
    assert result.details.institution == "Johns Hopkins University"


def test_changed_roll_number_is_not_found(issued):
    result = verify_claim(claim(roll_number="CS-124"), issued)

    assert result.verified is False
    assert result.reason == VerificationReason.NOT_FOUND
    assert result.details is None


def test_changed_issue_date_is_not_found_not_mismatch(issued):
    result = verify_claim(claim(issue_date="2023-05-21"), issued)

    assert result.reason == VerificationReason.NOT_FOUND
    assert "does not exist" in result.message


def test_supplied_hash_with_foreign_fields_is_mismatch(issued):
    genuine_hash = compute_fingerprint("CS-123", "JHU-84321-2023", "2023-05-20")

    result = verify_claim(claim(roll_number="CS-999", certificate_hash=genuine_hash), issued)

    assert result.verified is False
    assert result.reason == VerificationReason.DETAIL_MISMATCH
    assert "do not match" in result.message


def test_supplied_hash_with_matching_fields_verifies(issued):
    genuine_hash = compute_fingerprint("CS-123", "JHU-84321-2023", "2023-05-20")

    result = verify_claim(claim(certificate_hash=genuine_hash), issued)

    assert result.reason == VerificationReason.OK


def test_boundary_shifted_claim_is_mismatch(issued):
    # Same concatenation, same hash, but not the issued fields
    result = verify_claim(claim(roll_number="CS-12", certificate_id="3JHU-84321-2023"), issued)

    assert result.reason == VerificationReason.DETAIL_MISMATCH


def test_revoked_certificate_does_not_verify(issued):
    issued.revoke("JHU-84321-2023")

    result = verify_claim(claim(), issued)

    assert result.verified is False
    assert result.reason == VerificationReason.REVOKED
    assert result.details is None


def test_deleted_certificate_is_not_found(issued):
    issued.delete("JHU-84321-2023")

    assert verify_claim(claim(), issued).reason == VerificationReason.NOT_FOUND


def test_storage_failure_is_not_reported_as_not_found():
    repository = MagicMock(spec=CertificateRepository)
    repository.find_by_hash.side_effect = StorageUnavailable("Certificate storage is unavailable.")

    with pytest.raises(StorageUnavailable):
        verify_claim(claim(), repository)


def test_document_verification_recomputes_hash(issued):
    extractor = StaticExtractor(fields=ExtractedFields(
        roll_number="CS-123", certificate_id="JHU-84321-2023", issue_date="2023-05-20"))

    result = VerificationService(issued, extractor).verify_document("data:image/png;base64,AAAA")

    assert extractor.calls == 1
    assert result.verified is True


def test_document_extraction_failure_skips_matcher():
    repository = MagicMock(spec=CertificateRepository)
    extractor = StaticExtractor(error=ExtractionFailed("Document extraction timed out."))

    with pytest.raises(ExtractionFailed):
        VerificationService(repository, extractor).verify_document("data:image/png;base64,AAAA")

    repository.find_by_hash.assert_not_called()


def test_document_fields_failing_claim_limits_skip_matcher():
    repository = MagicMock(spec=CertificateRepository)
    fields = ExtractedFields.model_construct(
        roll_number="CS-123",
        certificate_id="JHU-84321-2023",
        issue_date="Issued on the twentieth day of May, 2023",
    )
    extractor = StaticExtractor(fields=fields)

    with pytest.raises(ExtractionFailed) as exc:
        VerificationService(repository, extractor).verify_document("data:image/png;base64,AAAA")

    assert exc.value.configured is True
    repository.find_by_hash.assert_not_called()


def test_document_verification_without_provider():
    repository = MagicMock(spec=CertificateRepository)

    with pytest.raises(ExtractionFailed) as exc:
        VerificationService(repository).verify_document("data:image/png;base64,AAAA")

    assert exc.value.configured is False
