"""Flask integration for the Org/User API client."""
from .request_id import (
    init_request_id,
    current_request_id,
    current_call_context,
)

__all__ = [
    "init_request_id",
    "current_request_id",
    "current_call_context",
]
