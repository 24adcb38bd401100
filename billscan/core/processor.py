"""
Submission of queued images to the OCR service.
"""

from .errors import BillScanError
from .models import Status
from .ocr import OCRServiceClient
from .session import AppState, fail_submission, finish_submission, start_submission
from .utils import size_fmt


class ProcessingOrchestrator:
    """Drives one OCR request at a time and folds the outcome into the state."""

    def __init__(self, client: OCRServiceClient, verbose: bool = False):
        """
        Initialize orchestrator.

        Args:
            client: OCR service client used for every submission
            verbose: Whether to show per-image debugging output
        """
        self.client = client
        self.verbose = verbose
        self._in_flight = False

    def submit(self, state: AppState) -> AppState:
        """
        Send every queued image in one request.

        An empty queue or a submission already in flight leaves the state
        as it is. Errors never escape: they end up as a Failed status whose
        message is meant for the user.
        """
        if not state.queue:
            return state
        if self._in_flight or state.status.state == Status.SUBMITTING:
            print("[WARN] A submission is already in progress")
            return state

        state = start_submission(state)
        self._in_flight = True
        print(f"[INFO] Submitting {len(state.queue)} image(s) to {self.client.url}")
        if self.verbose:
            for img in state.queue:
                print(f"  [DEBUG] {img.name} ({img.mime_type}, {size_fmt(img.size)})")

        try:
            records = self.client.extract(state.queue)
        except BillScanError as e:
            print(f"[ERROR] {e}")
            return fail_submission(state, str(e))
        except Exception as e:
            print(f"[ERROR] Unexpected failure while processing images: {e}")
            return fail_submission(state, f"Unexpected error: {e}")
        finally:
            self._in_flight = False

        print(f"[OK] Extracted {len(records)} item(s)")
        return finish_submission(state, records)

