"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from designcat.application.design_queries import DesignQueries
from designcat.application.detail_price_rows import DetailPriceRowResolver
from designcat.application.product_design_lifecycle import (
    ProductDesignLifecycleManager,
)
from designcat.application.show_listing_detail import ShowListingDetailHandler
from designcat.infrastructure.config import get_settings
from designcat.infrastructure.persistence.json_history_repository import (
    JsonHistoryRepository,
)
from designcat.infrastructure.persistence.json_listing_repository import (
    JsonListingRepository,
)
from designcat.infrastructure.persistence.json_product_design_repository import (
    JsonProductDesignRepository,
)
from designcat.infrastructure.persistence.json_stock_source_reader import (
    JsonAttributeResolver,
    JsonStockSourceReader,
)


def design_repository() -> JsonProductDesignRepository:
    return JsonProductDesignRepository(get_settings().data_dir / "designs.json")


def history_repository() -> JsonHistoryRepository:
    return JsonHistoryRepository(get_settings().data_dir / "design_history.json")


def listing_repository() -> JsonListingRepository:
    return JsonListingRepository(get_settings().data_dir / "listings.json")


def lifecycle_manager() -> ProductDesignLifecycleManager:
    return ProductDesignLifecycleManager(
        design_repo=design_repository(),
        history_repo=history_repository(),
        policy=get_settings().lifecycle_policy(),
    )


def design_queries() -> DesignQueries:
    return DesignQueries(design_repository(), history_repository())


def listing_detail_handler() -> ShowListingDetailHandler:
    data_dir = get_settings().data_dir
    resolver = DetailPriceRowResolver(
        design_repo=design_repository(),
        attribute_resolver=JsonAttributeResolver(data_dir / "models.json"),
        stock_reader=JsonStockSourceReader(data_dir / "stock_sources.json"),
    )
    return ShowListingDetailHandler(listing_repository(), resolver)
