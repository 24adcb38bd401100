"""
Row insertion and removal.
"""

from typing import Optional

from .models import Dataset
from .schema import headers


def add_row(dataset: Optional[Dataset]) -> Optional[Dataset]:
    """Append a blank record holding every current header."""
    if dataset is None:
        return None
    new_row = {header: "" for header in headers(dataset)}
    return list(dataset) + [new_row]


def delete_row(dataset: Optional[Dataset], index: int) -> Optional[Dataset]:
    """Drop the record at index; unknown indices leave the rows as they are."""
    if dataset is None:
        return None
    return [item for i, item in enumerate(dataset) if i != index]
