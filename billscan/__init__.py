"""
BillScan

Review and correct tabular data extracted from bill images by a remote
OCR service, then export the corrected table as a document.
"""

__version__ = "1.0.0"
__author__ = "BillScan Contributors"

from billscan.core.models import EditSession, ImageResource, ProcessingStatus, Status

__all__ = ["EditSession", "ImageResource", "ProcessingStatus", "Status"]
