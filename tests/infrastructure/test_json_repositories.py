"""Tests for the JSON-file-backed repositories."""

import json
from dataclasses import replace
from datetime import timedelta

import pytest

from designcat.application.detail_price_rows import DetailPriceRowResolver
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import ConflictError, EntityNotFoundError, InvalidIDError
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.model.value_objects import ModelAttributes, ModelReference
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
from tests.fakes import T0, FakeClock

CTX = RequestContext(company_id="acme", actor_id="alice")


def _design(**overrides) -> ProductDesign:
    fields = dict(
        id="",
        company_id="acme",
        product_name="Shirt",
        references=(ModelReference("m1", 1), ModelReference("m2", 2)),
        created_at=T0,
        updated_at=T0,
    )
    fields.update(overrides)
    return ProductDesign(**fields)


class TestJsonProductDesignRepository:

    def test_creates_file_on_first_use(self, tmp_path):
        JsonProductDesignRepository(tmp_path / "nested" / "designs.json")
        assert json.loads((tmp_path / "nested" / "designs.json").read_text()) == []

    def test_create_assigns_sequential_ids(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        first = repo.create(CTX, _design())
        second = repo.create(CTX, _design())

        assert (first.id, second.id) == ("1", "2")
        assert first.version == 1

    def test_round_trip_preserves_fields(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        created = repo.create(
            CTX,
            _design(
                deleted_at=T0,
                deleted_by="bob",
                expires_at=T0 + timedelta(days=90),
            ),
        )

        loaded = JsonProductDesignRepository(tmp_path / "designs.json").get_by_id(
            CTX, created.id
        )
        assert loaded == created

    def test_unknown_id_raises(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        with pytest.raises(EntityNotFoundError):
            repo.get_by_id(CTX, "42")

    def test_duplicate_explicit_id_conflicts(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        repo.create(CTX, _design(id="x"))
        with pytest.raises(ConflictError):
            repo.create(CTX, _design(id="x"))

    def test_save_bumps_version(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        created = repo.create(CTX, _design())

        saved = repo.save(CTX, replace(created, product_name="Renamed"))

        assert saved.version == 2
        assert repo.get_by_id(CTX, created.id).product_name == "Renamed"

    def test_save_with_stale_version_conflicts(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        created = repo.create(CTX, _design())
        repo.save(CTX, replace(created, product_name="First writer"))

        with pytest.raises(ConflictError, match="concurrently"):
            repo.save(CTX, replace(created, product_name="Second writer"))
        assert repo.get_by_id(CTX, created.id).product_name == "First writer"

    def test_save_unknown_raises(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        with pytest.raises(EntityNotFoundError):
            repo.save(CTX, _design(id="nope"))

    def test_save_blank_id_rejected(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        with pytest.raises(InvalidIDError):
            repo.save(CTX, _design(id=" "))

    def test_mark_printed_is_idempotent(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        created = repo.create(CTX, _design())

        first = repo.mark_printed(CTX, created.id)
        second = repo.mark_printed(CTX, created.id)

        assert first.printed is True
        assert first.updated_by == "alice"
        assert second.version == first.version

    def test_list_by_company(self, tmp_path):
        repo = JsonProductDesignRepository(tmp_path / "designs.json")
        repo.create(CTX, _design())
        repo.create(CTX, _design(company_id="globex"))

        assert [d.company_id for d in repo.list_by_company(CTX, "acme")] == ["acme"]


class TestJsonHistoryRepository:

    def test_snapshots_append_and_list_newest_first(self, tmp_path):
        repo = JsonHistoryRepository(tmp_path / "history.json", clock=FakeClock())
        design = _design(id="7")

        repo.save_snapshot(CTX, design)
        repo.save_snapshot(
            CTX,
            replace(design, product_name="Renamed", updated_at=T0 + timedelta(hours=1)),
        )

        history = repo.list_by_design_id(CTX, "7")
        assert [d.product_name for d in history] == ["Renamed", "Shirt"]

        raw = json.loads((tmp_path / "history.json").read_text())
        assert [v["index"] for v in raw["7"]] == [1, 2]

    def test_existing_records_are_not_rewritten(self, tmp_path):
        path = tmp_path / "history.json"
        repo = JsonHistoryRepository(path)
        repo.save_snapshot(CTX, _design(id="7"))
        before = json.loads(path.read_text())["7"][0]

        repo.save_snapshot(CTX, _design(id="7", product_name="Other"))

        assert json.loads(path.read_text())["7"][0] == before

    def test_equal_timestamps_order_by_index(self, tmp_path):
        repo = JsonHistoryRepository(tmp_path / "history.json")
        repo.save_snapshot(CTX, _design(id="7", product_name="first"))
        repo.save_snapshot(CTX, _design(id="7", product_name="second"))

        assert [d.product_name for d in repo.list_by_design_id(CTX, "7")] == [
            "second",
            "first",
        ]

    def test_missing_timestamps_use_clock(self, tmp_path):
        repo = JsonHistoryRepository(tmp_path / "history.json", clock=FakeClock())
        repo.save_snapshot(CTX, _design(id="7", created_at=None, updated_at=None))

        [snapshot] = repo.list_by_design_id(CTX, "7")
        assert snapshot.updated_at == T0
        assert snapshot.created_at == T0

    def test_audit_keys_override_embedded_copy(self, tmp_path):
        path = tmp_path / "history.json"
        repo = JsonHistoryRepository(path)
        repo.save_snapshot(CTX, _design(id="7", updated_by="alice"))

        raw = json.loads(path.read_text())
        raw["7"][0]["history_updated_by"] = "auditor"
        path.write_text(json.dumps(raw))

        [snapshot] = repo.list_by_design_id(CTX, "7")
        assert snapshot.updated_by == "auditor"

    def test_blank_id_rejected(self, tmp_path):
        repo = JsonHistoryRepository(tmp_path / "history.json")
        with pytest.raises(InvalidIDError):
            repo.list_by_design_id(CTX, "  ")
        with pytest.raises(InvalidIDError):
            repo.save_snapshot(CTX, _design(id=""))

    def test_unknown_design_has_empty_history(self, tmp_path):
        repo = JsonHistoryRepository(tmp_path / "history.json")
        assert repo.list_by_design_id(CTX, "7") == []


class TestJsonReadModels:

    def test_listing_keeps_raw_price_rows(self, tmp_path):
        path = tmp_path / "listings.json"
        path.write_text(json.dumps([
            {
                "id": "L1",
                "company_id": "acme",
                "design_id": "1",
                "price_rows": [{"modelId": "m1", "price": "1200"}],
            }
        ]))
        listing = JsonListingRepository(path).get_by_id(CTX, "L1")

        assert listing.price_rows == ({"modelId": "m1", "price": "1200"},)
        assert JsonListingRepository(path).get_by_id(CTX, "L2") is None

    def test_stock_source_reader(self, tmp_path):
        path = tmp_path / "stock_sources.json"
        path.write_text(json.dumps([
            {"id": "s1", "rows": [{"model_id": "m1", "stock": 4, "size": "M"}]}
        ]))
        reader = JsonStockSourceReader(path)

        detail = reader.get_detail_by_id(CTX, "s1")
        assert detail.rows[0].stock == 4
        assert detail.rows[0].size == "M"
        with pytest.raises(EntityNotFoundError):
            reader.get_detail_by_id(CTX, "s2")

    def test_stock_source_reader_normalizes_stock(self, tmp_path):
        path = tmp_path / "stock_sources.json"
        path.write_text(json.dumps([
            {
                "id": "s1",
                "rows": [
                    {"model_id": "m1", "stock": "5"},
                    {"model_id": "m2", "stock": None},
                    {"model_id": "m3", "stock": "many"},
                    {"model_id": "m4", "stock": 3.0},
                    {"model_id": "m5"},
                ],
            }
        ]))

        detail = JsonStockSourceReader(path).get_detail_by_id(CTX, "s1")

        assert [row.stock for row in detail.rows] == [5, None, None, 3, 0]

    def test_malformed_stock_does_not_break_detail_rows(self, tmp_path):
        path = tmp_path / "stock_sources.json"
        path.write_text(json.dumps([
            {"id": "s1", "rows": [{"model_id": "m1", "stock": None}]}
        ]))
        resolver = DetailPriceRowResolver(stock_reader=JsonStockSourceReader(path))

        result = resolver.build_detail_price_rows(
            CTX, [{"modelId": "m1", "stock": 2}], "s1", None, {}
        )

        assert result.total_stock == 0
        assert "sourceRowErr[m1]" in result.diagnostic

    def test_stock_source_reader_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonStockSourceReader(tmp_path / "absent.json").get_detail_by_id(CTX, "s1")

    def test_attribute_resolver(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps([{"id": "m1", "color": "Red", "rgb": 16711680}]))
        resolver = JsonAttributeResolver(path)

        assert resolver.resolve(CTX, "m1") == ModelAttributes(color="Red", rgb=16711680)
        assert resolver.resolve(CTX, "m9").is_empty
        assert JsonAttributeResolver(tmp_path / "absent.json").resolve(CTX, "m1").is_empty
