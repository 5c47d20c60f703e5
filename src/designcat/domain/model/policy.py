"""Lifecycle policy for product designs.

Built once at the composition root from configuration and injected into the
lifecycle manager, so tests can vary it freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from designcat.domain.exceptions import ValidationError

DEFAULT_SOFT_DELETE_TTL = timedelta(days=90)


@dataclass(frozen=True)
class LifecyclePolicy:
    """Retention window and modification rules.

    ``soft_delete_ttl`` is the time between a soft delete and the moment the
    design becomes eligible for hard deletion.  ``printed_locks_design``
    refuses edits, deletes and restores once labels have been printed.
    """

    soft_delete_ttl: timedelta = DEFAULT_SOFT_DELETE_TTL
    printed_locks_design: bool = True

    def __post_init__(self) -> None:
        if self.soft_delete_ttl <= timedelta(0):
            raise ValidationError(
                f"Soft delete retention must be positive, got {self.soft_delete_ttl}"
            )
