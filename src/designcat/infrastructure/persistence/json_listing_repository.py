"""JSON-file-backed implementation of ListingRepository."""

from __future__ import annotations

import json
from pathlib import Path

from designcat.domain.context import RequestContext
from designcat.domain.model.listing import Listing
from designcat.domain.repository.listing_repository import ListingRepository


class JsonListingRepository(ListingRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get_by_id(self, ctx: RequestContext, listing_id: str) -> Listing | None:
        for raw in self._load_raw():
            if raw["id"] == listing_id:
                return self._to_domain(raw)
        return None

    @staticmethod
    def _to_domain(raw: dict) -> Listing:
        # price_rows stay raw; detail resolution reads them.
        return Listing(
            id=raw["id"],
            company_id=raw.get("company_id", ""),
            design_id=raw.get("design_id", ""),
            title=raw.get("title", ""),
            stock_source_id=raw.get("stock_source_id", ""),
            price_rows=tuple(raw.get("price_rows", [])),
        )

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
