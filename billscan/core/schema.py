"""
Column inference over heterogeneous records.
"""

from collections.abc import Mapping
from typing import List, Optional

# Primary (vendor/shop identity) column detection
PRIMARY_SUBSTRINGS = ("shop", "vendor")
PRIMARY_KEY = "shop_name"


def is_dataset(dataset) -> bool:
    """True when dataset is a list/tuple made only of mappings."""
    if not isinstance(dataset, (list, tuple)):
        return False
    return all(isinstance(item, Mapping) for item in dataset)


def field_names(dataset) -> List[str]:
    """Distinct field names across all records, in first-seen order."""
    if not is_dataset(dataset):
        return []
    seen = {}
    for item in dataset:
        for key in item.keys():
            seen.setdefault(key, None)
    return list(seen)


def find_primary(names: List[str]) -> Optional[str]:
    """
    Guess which field holds the shop/vendor identity.

    The first name containing "shop" or "vendor" (case-insensitive), or
    equal to "shop_name", wins. Unrelated names such as "shopping_list"
    also match.
    """
    for name in names:
        lowered = name.lower()
        if any(s in lowered for s in PRIMARY_SUBSTRINGS) or name == PRIMARY_KEY:
            return name
    return None


def headers(dataset) -> List[str]:
    """
    Ordered column list for a dataset.

    Recomputed on every call; the primary column, if any, is moved to the
    front. Returns an empty list for absent or invalid datasets.
    """
    names = field_names(dataset)
    primary = find_primary(names)
    if primary is not None:
        names = [primary] + [n for n in names if n != primary]
    return names


def primary_column(dataset) -> Optional[str]:
    return find_primary(field_names(dataset))


def resolve_column(dataset, col: int) -> Optional[str]:
    """Resolve a column index against the current headers (None when out of range)."""
    hdrs = headers(dataset)
    if not isinstance(col, int) or col < 0 or col >= len(hdrs):
        return None
    return hdrs[col]
