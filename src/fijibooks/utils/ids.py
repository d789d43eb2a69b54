"""Identifier generation."""

from typing import Collection
from uuid import uuid4


def generate_id(existing: Collection[str] = ()) -> str:
    """Return a short random identifier not present in ``existing``."""
    while True:
        candidate = uuid4().hex[:9]
        if candidate not in existing:
            return candidate
