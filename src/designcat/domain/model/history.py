"""History snapshots: immutable, versioned copies of a product design.

A snapshot is appended after every successful mutation.  Its
``history_updated_at`` / ``history_updated_by`` are the audit-trail keys;
when a snapshot is read back they override whatever the embedded copy
happens to carry.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from designcat.domain.exceptions import InvalidIDError
from designcat.domain.model.product_design import ProductDesign


@dataclass(frozen=True)
class HistorySnapshot:
    design_id: str
    index: int
    history_updated_at: datetime
    history_updated_by: str | None
    design: ProductDesign

    @staticmethod
    def capture(design: ProductDesign, index: int, now: datetime) -> HistorySnapshot:
        """Copy *design* for the history, filling empty audit timestamps.

        The defaults apply to the captured copy only; the caller's design
        is left untouched.
        """
        design_id = (design.id or "").strip()
        if not design_id:
            raise InvalidIDError("Cannot snapshot a product design without an id")

        updated_at = design.updated_at or now
        created_at = design.created_at or updated_at
        copy = replace(design, updated_at=updated_at, created_at=created_at)

        updated_by = (design.updated_by or "").strip() or None

        return HistorySnapshot(
            design_id=design_id,
            index=index,
            history_updated_at=updated_at,
            history_updated_by=updated_by,
            design=copy,
        )

    def as_audited_design(self) -> ProductDesign:
        """The embedded copy with audit fields taken from the history keys."""
        updated_by = self.history_updated_by or self.design.updated_by
        return replace(
            self.design,
            updated_at=self.history_updated_at,
            updated_by=updated_by,
        )

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.history_updated_at, self.index)


def newest_first(snapshots: list[HistorySnapshot]) -> list[HistorySnapshot]:
    """Order snapshots by ``history_updated_at`` desc, ties by index desc.

    Ties are normal: appending model references leaves ``updated_at`` as
    it was, so that snapshot shares its timestamp with the previous one.
    """
    return sorted(snapshots, key=lambda snap: snap.sort_key, reverse=True)
