"""
Data models for bill review.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

# A record is one extracted line item; keys are not predeclared.
Record = Dict[str, str]
Dataset = List[Record]


@dataclass(frozen=True)
class ImageResource:
    """A binary image waiting to be sent to the OCR service."""
    name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class EditSession:
    """Single-cell edit in progress."""
    row: int
    col: int
    pending: str = ""
    field: Optional[str] = None


class Status(str, Enum):
    """Processing orchestrator states."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProcessingStatus:
    state: Status = Status.IDLE
    message: str = ""

    @property
    def loading(self) -> bool:
        return self.state == Status.SUBMITTING

    @property
    def terminal(self) -> bool:
        return self.state in (Status.SUCCEEDED, Status.FAILED)
