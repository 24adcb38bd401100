"""
Application state for a review session.

``AppState`` bundles the acquisition queue, the dataset, the edit session and
the processing status. Operations take a state and return the next one.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Tuple

from . import editing, rows
from .models import Dataset, EditSession, ImageResource, ProcessingStatus, Status
from .reporting import build_document
from .schema import headers, resolve_column


@dataclass(frozen=True)
class AppState:
    queue: Tuple[ImageResource, ...] = ()
    dataset: Optional[Dataset] = None
    edit: Optional[EditSession] = None
    status: ProcessingStatus = ProcessingStatus()

    @property
    def headers(self):
        return headers(self.dataset)


# Acquisition queue

def enqueue(state: AppState, *images: ImageResource) -> AppState:
    return replace(state, queue=state.queue + tuple(images))


def clear_queue(state: AppState) -> AppState:
    return replace(state, queue=())


# Cell editing

def begin_edit(state: AppState, row: int, col: int) -> AppState:
    """Activate a cell, seeding the pending text with its current value."""
    if state.dataset is None:
        return state
    field = resolve_column(state.dataset, col)
    current = ""
    if field is not None and 0 <= row < len(state.dataset):
        current = state.dataset[row].get(field) or ""
    return replace(state, edit=editing.begin_edit(state.edit, row, col, current, field=field))


def update_pending(state: AppState, text: str) -> AppState:
    return replace(state, edit=editing.update_pending(state.edit, text))


def commit_edit(state: AppState) -> AppState:
    edit, dataset = editing.commit(state.edit, state.dataset)
    return replace(state, edit=edit, dataset=dataset)


def cancel_edit(state: AppState) -> AppState:
    return replace(state, edit=editing.cancel(state.edit))


def handle_key(state: AppState, key: str) -> AppState:
    edit, dataset = editing.handle_key(state.edit, state.dataset, key)
    return replace(state, edit=edit, dataset=dataset)


def blur(state: AppState) -> AppState:
    edit, dataset = editing.blur(state.edit, state.dataset)
    return replace(state, edit=edit, dataset=dataset)


# Rows

def add_row(state: AppState) -> AppState:
    return replace(state, dataset=rows.add_row(state.dataset))


def delete_row(state: AppState, index: int) -> AppState:
    return replace(state, dataset=rows.delete_row(state.dataset, index))


def export(state: AppState) -> bytes:
    return build_document(state.dataset)


# Processing status

def start_submission(state: AppState) -> AppState:
    """Clear the previous results and mark the request in flight."""
    return replace(state, dataset=None, edit=None,
                   status=ProcessingStatus(Status.SUBMITTING))


def finish_submission(state: AppState, records: Iterable[Dict[str, str]]) -> AppState:
    return replace(state, dataset=list(records), edit=None,
                   status=ProcessingStatus(Status.SUCCEEDED))


def fail_submission(state: AppState, message: str) -> AppState:
    return replace(state, dataset=None, status=ProcessingStatus(Status.FAILED, message))


def summary(state: AppState) -> Dict[str, int]:
    return {
        "images_selected": len(state.queue),
        "items_extracted": len(state.dataset) if state.dataset else 0,
    }
