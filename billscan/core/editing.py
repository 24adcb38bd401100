"""
Single-cell edit state machine.

A session is either ``None`` (idle) or an ``EditSession``. Every function
returns the next session instead of mutating anything, and only ``commit``
produces a changed dataset.
"""

from dataclasses import replace
from typing import Optional, Tuple

from .models import Dataset, EditSession
from .schema import resolve_column

ACCEPT_KEY = "Enter"
CANCEL_KEY = "Escape"


def begin_edit(session: Optional[EditSession], row: int, col: int,
               current_value: Optional[str], field: Optional[str] = None) -> Optional[EditSession]:
    """
    Start editing a cell.

    No-op while another cell is being edited; the caller has to commit or
    cancel first. Re-activating the cell being edited keeps its pending text.
    """
    if session is not None:
        return session
    return EditSession(row=row, col=col, pending=current_value or "", field=field)


def update_pending(session: Optional[EditSession], text: str) -> Optional[EditSession]:
    if session is None:
        return None
    return replace(session, pending=text)


def _is_row(dataset: Dataset, row: int) -> bool:
    return isinstance(row, int) and 0 <= row < len(dataset)


def commit(session: Optional[EditSession],
           dataset: Optional[Dataset]) -> Tuple[None, Optional[Dataset]]:
    """
    Write the pending value into the dataset and go idle.

    The column index is resolved against the headers of the dataset as it is
    now. A vanished row, an out-of-range column, or a column that resolves
    to a different field than when editing began leaves the data alone.
    """
    if session is None or dataset is None:
        return None, dataset
    if not _is_row(dataset, session.row):
        return None, dataset
    header = resolve_column(dataset, session.col)
    if header is None:
        return None, dataset
    if session.field is not None and session.field != header:
        return None, dataset

    updated = list(dataset)
    record = dict(updated[session.row])
    record[header] = session.pending
    updated[session.row] = record
    return None, updated


def cancel(session: Optional[EditSession]) -> None:
    return None


def blur(session: Optional[EditSession],
         dataset: Optional[Dataset]) -> Tuple[None, Optional[Dataset]]:
    """Losing focus saves the edit."""
    return commit(session, dataset)


def handle_key(session: Optional[EditSession], dataset: Optional[Dataset],
               key: str) -> Tuple[Optional[EditSession], Optional[Dataset]]:
    if key == ACCEPT_KEY:
        return commit(session, dataset)
    if key == CANCEL_KEY:
        return cancel(session), dataset
    return session, dataset
