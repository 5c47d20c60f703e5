"""Application service: Show Listing Detail use case (query)."""

from __future__ import annotations

import logging

from designcat.application.detail_price_rows import (
    AttributeCache,
    DetailPriceRowResolver,
)
from designcat.application.dto import ListingDetailDTO
from designcat.application.product_design_lifecycle import require_company_id
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidIDError,
)
from designcat.domain.repository.listing_repository import ListingRepository

logger = logging.getLogger(__name__)


class ShowListingDetailHandler:

    def __init__(
        self,
        listing_repo: ListingRepository,
        resolver: DetailPriceRowResolver,
    ) -> None:
        self._listing_repo = listing_repo
        self._resolver = resolver

    def handle(self, ctx: RequestContext, listing_id: str) -> ListingDetailDTO:
        listing_id = (listing_id or "").strip()
        if not listing_id:
            raise InvalidIDError("Listing ID is required")
        cid = require_company_id(ctx)

        ctx.check()
        listing = self._listing_repo.get_by_id(ctx, listing_id)
        if listing is None:
            raise EntityNotFoundError(f"Listing '{listing_id}' not found")
        if listing.company_id != cid:
            raise ForbiddenError(f"Listing '{listing_id}' does not belong to this company")

        # Fresh for every request.
        cache: AttributeCache = {}
        result = self._resolver.build_detail_price_rows(
            ctx,
            listing.price_rows,
            stock_source_id=listing.stock_source_id,
            design_id=listing.design_id,
            attribute_cache=cache,
        )
        logger.info("[modelMetadata] listing=%s %s", listing_id, result.diagnostic)

        return ListingDetailDTO(
            id=listing.id,
            title=listing.title,
            design_id=listing.design_id,
            stock_source_id=listing.stock_source_id,
            price_rows=result.rows,
            total_stock=result.total_stock,
        )
