"""Request context: the caller's tenant, actor and cancellation state.

One ``RequestContext`` is built per incoming request by the transport layer
and threaded through every repository and reader call.  The tenant id here
is the only one the core trusts; a ``company_id`` carried by a payload is
always overwritten.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from designcat.domain.exceptions import OperationCancelledError


@dataclass(frozen=True)
class RequestContext:
    company_id: str = ""
    actor_id: str | None = None
    deadline: datetime | None = None
    _cancelled: threading.Event = field(
        default_factory=threading.Event, repr=False, compare=False
    )

    @property
    def tenant_id(self) -> str:
        return (self.company_id or "").strip()

    def cancel(self) -> None:
        self._cancelled.set()

    def check(self) -> None:
        """Raise OperationCancelledError if the request should stop."""
        if self._cancelled.is_set():
            raise OperationCancelledError("Request was cancelled")
        if self.deadline is not None and datetime.now(timezone.utc) >= self.deadline:
            raise OperationCancelledError(
                f"Request deadline {self.deadline.isoformat()} exceeded"
            )
