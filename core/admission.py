# core/admission.py
from __future__ import annotations
from datetime import date
from typing import Optional

DEFAULT_PREFIX = "AHP"


def generate_admission_number(count: int, year: Optional[int] = None, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Build the next admission number from the current record count.

    Format is prefix + four-digit year + (count + 1) zero-padded to three
    digits, e.g. AHP2024001. Past 999 the sequence just widens.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValueError(f"count must be a non-negative integer, got {count!r}")
    if year is None:
        year = date.today().year
    return f"{prefix}{year}{count + 1:03d}"
