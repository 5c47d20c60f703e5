"""JSON-file-backed implementation of HistoryRepository.

Layout: ``{design_id: [snapshot, ...]}``.  Each snapshot is a separate
record with its own ``index``; existing records are never rewritten.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from designcat.domain.context import RequestContext
from designcat.domain.exceptions import InvalidIDError
from designcat.domain.model.history import HistorySnapshot, newest_first
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.repository.history_repository import HistoryRepository
from designcat.infrastructure.persistence.json_product_design_repository import (
    design_from_raw,
    design_to_raw,
)


class JsonHistoryRepository(HistoryRepository):

    def __init__(
        self,
        file_path: Path,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._file_path = file_path
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._ensure_file()

    # --- HistoryRepository interface ------------------------------------------

    def save_snapshot(self, ctx: RequestContext, design: ProductDesign) -> None:
        history = self._load_raw()
        versions = history.setdefault((design.id or "").strip(), [])

        next_index = max((v["index"] for v in versions), default=0) + 1
        snapshot = HistorySnapshot.capture(design, next_index, self._clock())

        versions.append(self._to_raw(snapshot))
        self._persist_raw(history)

    def list_by_design_id(self, ctx: RequestContext, design_id: str) -> list[ProductDesign]:
        design_id = (design_id or "").strip()
        if not design_id:
            raise InvalidIDError("Product design ID is required")

        snapshots = [
            self._to_domain(design_id, raw)
            for raw in self._load_raw().get(design_id, [])
        ]
        return [snap.as_audited_design() for snap in newest_first(snapshots)]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(snapshot: HistorySnapshot) -> dict:
        raw = {
            "index": snapshot.index,
            "history_updated_at": snapshot.history_updated_at.isoformat(),
            "design": design_to_raw(snapshot.design),
        }
        if snapshot.history_updated_by:
            raw["history_updated_by"] = snapshot.history_updated_by
        return raw

    @staticmethod
    def _to_domain(design_id: str, raw: dict) -> HistorySnapshot:
        return HistorySnapshot(
            design_id=design_id,
            index=raw["index"],
            history_updated_at=datetime.fromisoformat(raw["history_updated_at"]),
            history_updated_by=raw.get("history_updated_by"),
            design=design_from_raw(raw["design"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, history: dict[str, list[dict]]) -> None:
        self._file_path.write_text(
            json.dumps(history, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
