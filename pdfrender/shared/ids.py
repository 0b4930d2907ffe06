"""
ID generation helpers.
"""

import uuid


def generate_request_id() -> str:
    """Generate an opaque request identifier."""
    return f"req_{uuid.uuid4().hex[:16]}"
