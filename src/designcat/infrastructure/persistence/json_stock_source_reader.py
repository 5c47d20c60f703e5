"""JSON-file-backed stock source and model attribute readers."""

from __future__ import annotations

import json
from pathlib import Path

from designcat.domain.context import RequestContext
from designcat.domain.exceptions import EntityNotFoundError
from designcat.domain.model.listing import StockSourceDetail, StockSourceRow
from designcat.domain.model.value_objects import ModelAttributes
from designcat.domain.repository.stock_source_reader import (
    AttributeResolver,
    StockSourceReader,
)


class JsonStockSourceReader(StockSourceReader):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get_detail_by_id(self, ctx: RequestContext, source_id: str) -> StockSourceDetail:
        if not self._file_path.exists():
            raise FileNotFoundError(f"Stock source file {self._file_path} is missing")

        for raw in json.loads(self._file_path.read_text(encoding="utf-8")):
            if raw["id"] != source_id:
                continue
            return StockSourceDetail(
                source_id=source_id,
                rows=tuple(
                    StockSourceRow(
                        target_id=row.get("model_id", ""),
                        stock=_read_stock(row.get("stock", 0)),
                        size=row.get("size", ""),
                        color=row.get("color", ""),
                        rgb=row.get("rgb"),
                    )
                    for row in raw.get("rows", [])
                ),
            )
        raise EntityNotFoundError(f"Stock source '{source_id}' not found")


def _read_stock(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


class JsonAttributeResolver(AttributeResolver):
    """Reads model attributes from a ``[{"id", "size", "color", "rgb"}]`` file."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def resolve(self, ctx: RequestContext, target_id: str) -> ModelAttributes:
        if not self._file_path.exists():
            return ModelAttributes()

        for raw in json.loads(self._file_path.read_text(encoding="utf-8")):
            if raw.get("id") == target_id:
                return ModelAttributes(
                    size=raw.get("size", ""),
                    color=raw.get("color", ""),
                    rgb=raw.get("rgb"),
                )
        return ModelAttributes()
