"""Tests for the ShowListingDetail query."""

import logging

import pytest

from designcat.application.detail_price_rows import DetailPriceRowResolver
from designcat.application.show_listing_detail import ShowListingDetailHandler
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidCompanyIDError,
    InvalidIDError,
)
from designcat.domain.model.listing import Listing, StockSourceDetail, StockSourceRow
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.model.value_objects import ModelAttributes, ModelReference
from tests.fakes import (
    FakeAttributeResolver,
    FakeListingRepository,
    FakeProductDesignRepository,
    FakeStockSourceReader,
)

CTX = RequestContext(company_id="acme")


def _setup() -> tuple[ShowListingDetailHandler, FakeAttributeResolver]:
    listings = [
        Listing(
            id="L1",
            company_id="acme",
            design_id="d1",
            title="Summer shirts",
            stock_source_id="s1",
            price_rows=(
                {"modelId": "m1", "price": 1000},
                {"modelId": "m2", "price": 1100},
            ),
        ),
        Listing(id="L2", company_id="globex", design_id="d1"),
    ]
    design = ProductDesign(
        id="d1",
        company_id="acme",
        product_name="Shirt",
        references=(ModelReference("m2", 1), ModelReference("m1", 2)),
    )
    source = StockSourceDetail("s1", (StockSourceRow("m1", 3), StockSourceRow("m2", 5)))
    attributes = FakeAttributeResolver({"m1": ModelAttributes(size="M")})

    resolver = DetailPriceRowResolver(
        design_repo=FakeProductDesignRepository([design]),
        attribute_resolver=attributes,
        stock_reader=FakeStockSourceReader([source]),
    )
    return ShowListingDetailHandler(FakeListingRepository(listings), resolver), attributes


class TestShowListingDetail:

    def test_returns_resolved_rows(self):
        handler, _ = _setup()
        dto = handler.handle(CTX, "L1")

        assert dto.title == "Summer shirts"
        assert [(r.target_id, r.display_order, r.stock) for r in dto.price_rows] == [
            ("m1", 2, 3),
            ("m2", 1, 5),
        ]
        assert dto.total_stock == 8
        assert dto.price_rows[0].size == "M"

    def test_logs_diagnostic(self, caplog, monkeypatch):
        # the CLI's dictConfig stops "designcat" records from reaching root
        monkeypatch.setattr(logging.getLogger("designcat"), "propagate", True)
        handler, _ = _setup()
        with caplog.at_level(logging.INFO, logger="designcat"):
            handler.handle(CTX, "L1")
        assert "[modelMetadata] listing=L1 rows=2" in caplog.text

    def test_cache_is_not_shared_between_requests(self):
        handler, attributes = _setup()
        handler.handle(CTX, "L1")
        handler.handle(CTX, "L1")
        assert attributes.calls.count("m1") == 2

    def test_blank_id_rejected(self):
        handler, _ = _setup()
        with pytest.raises(InvalidIDError):
            handler.handle(CTX, " ")

    def test_missing_tenant_rejected(self):
        handler, _ = _setup()
        with pytest.raises(InvalidCompanyIDError):
            handler.handle(RequestContext(), "L1")

    def test_unknown_listing(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(CTX, "L404")

    def test_foreign_listing_forbidden(self):
        handler, _ = _setup()
        with pytest.raises(ForbiddenError):
            handler.handle(CTX, "L2")
