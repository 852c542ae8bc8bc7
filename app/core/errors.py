"""
Domain exceptions raised by the storage adapters and services.

Verification outcomes (not found, detail mismatch, revoked) are NOT errors;
they are returned as `VerificationResult` values. These exceptions cover the
conditions where no verdict can be reached at all.
"""


class CertificateError(Exception):
    """Base class for every certificate-domain failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateIdentity(CertificateError):
    """An insert reused an existing certificate_id or certificate_hash."""


class CertificateNotFound(CertificateError):
    """No record carries the requested business identifier."""


class StorageUnavailable(CertificateError):
    """The storage collaborator could not be reached or failed mid-query."""


class ExtractionFailed(CertificateError):
    """The document provider could not produce usable identity fields."""

    def __init__(self, message: str, configured: bool = True):
        super().__init__(message)
        self.configured = configured


class InvalidDocument(ExtractionFailed):
    """The submitted document was rejected before reaching the provider."""
