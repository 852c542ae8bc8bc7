import base64
import binascii
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

import httpx
from pydantic import ValidationError
from loguru import logger

from app.core.errors import ExtractionFailed, InvalidDocument
from app.models.verification import ExtractedFields


DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)

SUPPORTED_MIME_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/tiff",
    "image/webp",
}

# Provider responses may use either naming style
FIELD_ALIASES = {
    "roll_number": ("roll_number", "rollNumber"),
    "certificate_id": ("certificate_id", "certificateId"),
    "issue_date": ("issue_date", "issueDate"),
}


def parse_data_uri(data_uri: str) -> Tuple[str, str]:
    """
    Splits 'data:<mimetype>;base64,<encoded_data>' into (mime type, payload).
    The payload is checked to be valid base64 but returned still encoded.
    """
    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise InvalidDocument(
            "Document must be a base64 data URI ('data:<mimetype>;base64,<data>').")

    mime_type = match.group("mime").lower()
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise InvalidDocument(
            f"Unsupported document type '{mime_type}'. Allowed types: "
            + ", ".join(sorted(SUPPORTED_MIME_TYPES)))

    encoded = match.group("data")
    try:
        base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidDocument("Document payload is not valid base64.")

    return mime_type, encoded


def fields_from_response(data: Any) -> ExtractedFields:
    if not isinstance(data, dict):
        raise ExtractionFailed("Extraction provider returned an unexpected payload.")

    values = {}
    for field, aliases in FIELD_ALIASES.items():
        value = next((data[a] for a in aliases if a in data), None)
        if not isinstance(value, str) or not value.strip():
            raise ExtractionFailed(
                f"Could not extract '{field}' from the certificate document.")
        values[field] = value

    try:
        return ExtractedFields(**values)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ExtractionFailed(
            f"Extracted certificate fields are unusable: {fields}.") from e


class ExtractionProvider(ABC):
    """Turns a certificate document into its three identity fields."""

    @abstractmethod
    def extract(self, photo_data_uri: str) -> ExtractedFields:
        """
        Raises:
            ExtractionFailed: If usable fields cannot be produced.
        """


class HttpExtractionProvider(ExtractionProvider):
    """
    Calls an external OCR/AI service over HTTP.

    Request:  POST {url}  {"mime_type": "...", "data": "<base64>"}
    Response: {"roll_number": "...", "certificate_id": "...", "issue_date": "..."}

    Single attempt with a bounded timeout; every failure is surfaced as
    `ExtractionFailed`.
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def extract(self, photo_data_uri: str) -> ExtractedFields:
        mime_type, encoded = parse_data_uri(photo_data_uri)

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.url,
                    json={"mime_type": mime_type, "data": encoded},
                    headers=headers
                )
        except httpx.TimeoutException as e:
            logger.error(f"Extraction provider timed out after {self.timeout}s: {e}")
            raise ExtractionFailed("Document extraction timed out.") from e
        except httpx.RequestError as e:
            logger.error(f"Error connecting to extraction provider: {e}")
            raise ExtractionFailed("Document extraction service unavailable.") from e

        if response.status_code != 200:
            logger.error(
                f"Extraction provider error: {response.status_code} - {response.text}")
            raise ExtractionFailed(
                f"Document extraction failed with status {response.status_code}.")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Extraction provider returned a non-JSON body")
            raise ExtractionFailed(
                "Extraction provider returned an unexpected payload.") from e

        fields = fields_from_response(data)
        logger.info(f"Extracted certificate {fields.certificate_id} from document")
        return fields
