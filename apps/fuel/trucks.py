"""Truck number normalisation: `t100abc`, `T100-ABC`, `t100 abc` all become `T100 ABC`."""

import re

TRUCK_PATTERN = re.compile(r"^(T\d{3,4})([A-Z]{3})$")
_SEPARATORS   = re.compile(r"[\s\-]+")
_TRAILING     = re.compile(r"([A-Z]+)$")


def compact_truck_no(value: str) -> str:
    return _SEPARATORS.sub("", value or "").upper()


def normalize_truck_no(value: str) -> str:
    compact = compact_truck_no(value)
    match = TRUCK_PATTERN.match(compact)
    if match:
        return f"{match.group(1)} {match.group(2)}"
    return compact


def truck_suffix(truck_no: str) -> str:
    """Letters at the end of the plate; truck batches are keyed on them."""
    compact = compact_truck_no(truck_no)
    match = TRUCK_PATTERN.match(compact)
    if match:
        return match.group(2)
    match = _TRAILING.search(compact)
    return match.group(1) if match else ""
