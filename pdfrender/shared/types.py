"""
Shared types.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Per-request metadata carried through logging."""
    request_id: str
    client: str | None = None
