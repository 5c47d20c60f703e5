"""JSON-file-backed implementation of ProductDesignRepository."""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from designcat.domain.context import RequestContext
from designcat.domain.exceptions import ConflictError, EntityNotFoundError, InvalidIDError
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.model.value_objects import ModelReference
from designcat.domain.repository.product_design_repository import (
    ProductDesignRepository,
)


class JsonProductDesignRepository(ProductDesignRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- ProductDesignRepository interface ------------------------------------

    def get_by_id(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        design_id = (design_id or "").strip()
        for raw in self._load_raw():
            if raw["id"] == design_id:
                return design_from_raw(raw)
        raise EntityNotFoundError(f"Product design '{design_id}' not found")

    def create(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        records = self._load_raw()

        design_id = (design.id or "").strip() or self._next_id(records)
        if any(raw["id"] == design_id for raw in records):
            raise ConflictError(f"Product design '{design_id}' already exists")

        stored = replace(design, id=design_id, version=1)
        records.append(design_to_raw(stored))
        self._persist_raw(records)
        return stored

    def save(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        design_id = (design.id or "").strip()
        if not design_id:
            raise InvalidIDError("Product design ID is required")

        records = self._load_raw()
        for i, raw in enumerate(records):
            if raw["id"] != design_id:
                continue
            stored_version = raw.get("version", 0)
            if stored_version != design.version:
                raise ConflictError(
                    f"Product design '{design_id}' was modified concurrently "
                    f"(expected version {design.version}, found {stored_version})"
                )
            stored = replace(design, id=design_id, version=stored_version + 1)
            records[i] = design_to_raw(stored)
            self._persist_raw(records)
            return stored

        raise EntityNotFoundError(f"Product design '{design_id}' not found")

    def mark_printed(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        current = self.get_by_id(ctx, design_id)
        printed = current.mark_printed(datetime.now(timezone.utc), ctx.actor_id)
        if printed is current:
            return current
        return self.save(ctx, printed)

    def list_by_company(self, ctx: RequestContext, company_id: str) -> list[ProductDesign]:
        return [
            design_from_raw(raw)
            for raw in self._load_raw()
            if raw.get("company_id") == company_id
        ]

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _next_id(records: list[dict]) -> str:
        numeric = [int(raw["id"]) for raw in records if str(raw["id"]).isdigit()]
        return str(max(numeric) + 1) if numeric else "1"

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


# --- Serialization (shared with the history store) ---------------------------


def design_to_raw(design: ProductDesign) -> dict:
    return {
        "id": design.id,
        "company_id": design.company_id,
        "product_name": design.product_name,
        "brand_id": design.brand_id,
        "assignee_id": design.assignee_id,
        "model_refs": [
            {"model_id": ref.target_id, "display_order": ref.order}
            for ref in design.references
        ],
        "printed": design.printed,
        "created_at": _dump_time(design.created_at),
        "created_by": design.created_by,
        "updated_at": _dump_time(design.updated_at),
        "updated_by": design.updated_by,
        "deleted_at": _dump_time(design.deleted_at),
        "deleted_by": design.deleted_by,
        "expires_at": _dump_time(design.expires_at),
        "version": design.version,
    }


def design_from_raw(raw: dict) -> ProductDesign:
    return ProductDesign(
        id=raw["id"],
        company_id=raw.get("company_id", ""),
        product_name=raw.get("product_name", ""),
        brand_id=raw.get("brand_id", ""),
        assignee_id=raw.get("assignee_id", ""),
        references=tuple(
            ModelReference(target_id=r["model_id"], order=r["display_order"])
            for r in raw.get("model_refs", [])
        ),
        printed=raw.get("printed", False),
        created_at=_load_time(raw.get("created_at")),
        created_by=raw.get("created_by"),
        updated_at=_load_time(raw.get("updated_at")),
        updated_by=raw.get("updated_by"),
        deleted_at=_load_time(raw.get("deleted_at")),
        deleted_by=raw.get("deleted_by"),
        expires_at=_load_time(raw.get("expires_at")),
        version=raw.get("version", 0),
    )


def _dump_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _load_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
