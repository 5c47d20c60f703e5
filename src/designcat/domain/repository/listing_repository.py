"""Abstract repository for listings (read side)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from designcat.domain.context import RequestContext
from designcat.domain.model.listing import Listing


class ListingRepository(ABC):

    @abstractmethod
    def get_by_id(self, ctx: RequestContext, listing_id: str) -> Listing | None:
        """Return a listing by its ID, or None if not found."""
