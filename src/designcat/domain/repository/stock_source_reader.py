"""Read-only ports used by detail resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod

from designcat.domain.context import RequestContext
from designcat.domain.model.listing import StockSourceDetail
from designcat.domain.model.value_objects import ModelAttributes


class StockSourceReader(ABC):

    @abstractmethod
    def get_detail_by_id(self, ctx: RequestContext, source_id: str) -> StockSourceDetail:
        """Return per-model stock (and attributes) for a stock source.

        May raise for an unknown or unreachable source; callers degrade.
        """


class AttributeResolver(ABC):

    @abstractmethod
    def resolve(self, ctx: RequestContext, target_id: str) -> ModelAttributes:
        """Return display attributes for a model; empty attributes if unknown."""
