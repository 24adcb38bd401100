"""
Exceptions raised at the acquisition and OCR service boundaries.
"""

from typing import Optional


class BillScanError(Exception):
    """Base class for errors surfaced to the user as a status message."""


class AcquisitionError(BillScanError):
    """An image could not be acquired (unsupported file, too large, unreadable)."""


class AcquisitionDenied(AcquisitionError):
    """Camera permission refused or no device available."""
    def __init__(self, detail: str = "Camera access denied or not available"):
        super().__init__(detail)


class SubmissionEmpty(BillScanError):
    """Submit attempted with nothing queued. Never shown to the user."""


class ServiceError(BillScanError):
    """The OCR service rejected the request or answered with an error."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(ServiceError):
    """The request never produced an HTTP response."""


class MalformedResponse(ServiceError):
    """A success response whose body is not the expected JSON shape."""
    def __init__(self, message: str = "Malformed response from OCR service",
                 status_code: Optional[int] = None):
        super().__init__(message, status_code)
