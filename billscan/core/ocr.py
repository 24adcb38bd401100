"""
Client for the remote OCR extraction service.
"""

from typing import Iterable, Optional

import httpx

from .errors import MalformedResponse, NetworkFailure, ServiceError, SubmissionEmpty
from .models import Dataset, ImageResource
from .utils import to_text

DEFAULT_SERVICE_URL = "http://bills-ocr-b.vercel.app/process-images"
DEFAULT_UPLOAD_FIELD = "files"


def error_message(response: httpx.Response) -> str:
    """
    Human-readable reason for a non-success response.

    Uses the JSON "detail" string when the service sends one.
    """
    try:
        body = response.json()
    except ValueError:
        return f"Unknown error (HTTP {response.status_code})"
    if isinstance(body, dict) and isinstance(body.get("detail"), str) and body["detail"]:
        return body["detail"]
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def parse_records(body) -> Dataset:
    """Validate the success payload and normalize every value to text."""
    if not isinstance(body, dict) or not isinstance(body.get("data"), list):
        raise MalformedResponse()
    records = []
    for item in body["data"]:
        if not isinstance(item, dict):
            raise MalformedResponse()
        records.append({str(k): to_text(v) for k, v in item.items()})
    return records


class OCRServiceClient:
    """Sends queued images to the OCR service in a single multipart request."""

    def __init__(self, url: str = DEFAULT_SERVICE_URL, timeout: float = 60.0,
                 upload_field: str = DEFAULT_UPLOAD_FIELD,
                 client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout = timeout
        self.upload_field = upload_field
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def extract(self, images: Iterable[ImageResource]) -> Dataset:
        """
        Submit images and return the extracted records.

        Raises:
            SubmissionEmpty: nothing to send
            NetworkFailure: the request did not complete
            ServiceError: non-success HTTP status
            MalformedResponse: success status but unexpected body
        """
        images = list(images)
        if not images:
            raise SubmissionEmpty("No images to submit")

        files = [(self.upload_field, (img.name, img.content, img.mime_type)) for img in images]
        try:
            response = self._client.post(self.url, files=files, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise NetworkFailure(f"Could not reach OCR service: {e}") from e

        if not response.is_success:
            raise ServiceError(error_message(response), status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponse(status_code=response.status_code) from e
        return parse_records(body)
