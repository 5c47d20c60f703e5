"""Abstract repository for product design history snapshots."""

from __future__ import annotations

from abc import ABC, abstractmethod

from designcat.domain.context import RequestContext
from designcat.domain.model.product_design import ProductDesign


class HistoryRepository(ABC):
    """Append-only store of design snapshots; there is no update or delete."""

    @abstractmethod
    def save_snapshot(self, ctx: RequestContext, design: ProductDesign) -> None:
        """Append a new snapshot of *design* under its ID."""

    @abstractmethod
    def list_by_design_id(self, ctx: RequestContext, design_id: str) -> list[ProductDesign]:
        """Return snapshots newest first, with audit fields from the history keys."""
