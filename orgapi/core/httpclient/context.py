"""Per-call context: correlation id, deadline and cancellation."""
from __future__ import annotations
import threading
import time
from dataclasses import dataclass
from typing import Optional

from .exceptions import TransportError

DEADLINE_EXCEEDED = "context deadline exceeded"
CANCELED = "context canceled"


@dataclass(frozen=True)
class CallContext:
    """Read-only values threaded through one logical call.

    Attributes:
        request_id: Correlation id forwarded as X-Request-Id (never sent empty)
        deadline: Absolute time.monotonic() value after which the call fails
        cancel_event: Optional event; once set, calls fail before any I/O
    """
    request_id: Optional[str] = None
    deadline: Optional[float] = None
    cancel_event: Optional[threading.Event] = None

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        request_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> "CallContext":
        """Create a context whose deadline is `seconds` from now."""
        return cls(
            request_id=request_id,
            deadline=time.monotonic() + seconds,
            cancel_event=cancel_event,
        )

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self) -> None:
        """Raise TransportError if the call was cancelled or has timed out."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise TransportError(CANCELED)
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise TransportError(DEADLINE_EXCEEDED)


BACKGROUND = CallContext()
