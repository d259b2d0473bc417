"""Identifier generation for stored records."""

import uuid


def generate_id(prefix: str) -> str:
    """Return a new unique id such as ``txn_3f2a9c0d41b7``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
