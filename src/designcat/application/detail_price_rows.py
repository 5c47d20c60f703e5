"""Application service: listing detail price rows.

Combines a listing's raw price rows with
- the display order of each model, taken from the design's references
- authoritative stock from an optional stock source
- size / colour / RGB, from the stock source or the attribute resolver

Auxiliary sources are best effort.  When one of them is missing or fails,
the rows fall back (embedded stock, empty attributes, unknown display
order) and the problem is reported in ``DetailPriceResult.diagnostic``
instead of failing the call.  Cancellation is never absorbed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from designcat.application.dto import DetailPriceResult, DetailPriceRow
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import OperationCancelledError, ValidationError
from designcat.domain.model.value_objects import ModelAttributes
from designcat.domain.repository.product_design_repository import (
    ProductDesignRepository,
)
from designcat.domain.repository.stock_source_reader import (
    AttributeResolver,
    StockSourceReader,
)

logger = logging.getLogger(__name__)

# Per-call memo of resolved attributes, keyed by model id.  The caller
# creates one per request and must not share it between requests.
AttributeCache = dict[str, ModelAttributes]

_TARGET_KEYS = ("modelId", "model_id", "targetId", "target_id", "id")
_PRICE_KEYS = ("price", "Price")
_STOCK_KEYS = ("stock", "Stock")


@dataclass
class _StockLookup:
    used: bool = False
    stock: dict[str, int] = field(default_factory=dict)
    attributes: dict[str, ModelAttributes] = field(default_factory=dict)


@dataclass
class _Tally:
    resolved_non_empty: int = 0
    resolved_empty: int = 0
    stock_from_source: int = 0
    stock_from_rows: int = 0
    problems: list[str] = field(default_factory=list)


class DetailPriceRowResolver:

    def __init__(
        self,
        design_repo: ProductDesignRepository | None = None,
        attribute_resolver: AttributeResolver | None = None,
        stock_reader: StockSourceReader | None = None,
    ) -> None:
        self._design_repo = design_repo
        self._attribute_resolver = attribute_resolver
        self._stock_reader = stock_reader

    def build_detail_price_rows(
        self,
        ctx: RequestContext,
        raw_rows: Iterable[Mapping[str, Any]],
        stock_source_id: str | None,
        design_id: str | None,
        attribute_cache: AttributeCache,
    ) -> DetailPriceResult:
        """Resolve *raw_rows* into display rows, keeping their order.

        Raises ValidationError only when a raw row is not a mapping.
        """
        rows = _as_mappings(raw_rows)
        tally = _Tally()

        display_orders = self._display_orders(ctx, design_id, tally)
        lookup = self._query_stock_source(ctx, stock_source_id, tally)

        out: list[DetailPriceRow] = []
        total = 0

        for raw in rows:
            target_id = _read_str(raw, _TARGET_KEYS)
            if not target_id:
                continue

            if lookup.used:
                stock = lookup.stock.get(target_id, 0)
                tally.stock_from_source += 1
            else:
                stock = _read_int(raw, _STOCK_KEYS) or 0
                tally.stock_from_rows += 1

            attrs = lookup.attributes.get(target_id)
            if attrs is None or attrs.is_empty:
                attrs = self._resolve_cached(ctx, target_id, attribute_cache, tally)

            if attrs.is_empty:
                tally.resolved_empty += 1
            else:
                tally.resolved_non_empty += 1

            out.append(
                DetailPriceRow(
                    target_id=target_id,
                    display_order=display_orders.get(target_id),
                    stock=stock,
                    price=_read_int(raw, _PRICE_KEYS),
                    size=attrs.size,
                    color=attrs.color,
                    rgb=attrs.rgb,
                )
            )
            total += stock

        return DetailPriceResult(
            rows=out,
            total_stock=total,
            diagnostic=_diagnostic(len(out), lookup.used, tally),
        )

    # --- Auxiliary sources ----------------------------------------------------

    def _display_orders(
        self, ctx: RequestContext, design_id: str | None, tally: _Tally
    ) -> dict[str, int]:
        design_id = (design_id or "").strip()
        if not design_id or self._design_repo is None:
            return {}

        ctx.check()
        try:
            design = self._design_repo.get_by_id(ctx, design_id)
        except OperationCancelledError:
            raise
        except Exception as exc:
            logger.warning("Display order unavailable for design %s: %s", design_id, exc)
            tally.problems.append(f"designErr={_one_line(exc)}")
            return {}

        if (design.company_id or "").strip() != ctx.tenant_id:
            logger.warning(
                "Display order withheld: design %s belongs to another company", design_id
            )
            tally.problems.append("designErr=design belongs to another company")
            return {}
        return design.display_orders()

    def _query_stock_source(
        self, ctx: RequestContext, source_id: str | None, tally: _Tally
    ) -> _StockLookup:
        lookup = _StockLookup()
        source_id = (source_id or "").strip()
        if not source_id or self._stock_reader is None:
            return lookup

        ctx.check()
        try:
            detail = self._stock_reader.get_detail_by_id(ctx, source_id)
        except OperationCancelledError:
            raise
        except Exception as exc:
            logger.warning(
                "Stock source %s unavailable, using listing stock: %s", source_id, exc
            )
            tally.problems.append(f"sourceErr={_one_line(exc)}")
            return lookup

        lookup.used = True
        for row in detail.rows:
            target_id = (row.target_id or "").strip()
            if not target_id:
                continue
            stock = _coerce_int(row.stock)
            if stock is None:
                tally.problems.append(f"sourceRowErr[{target_id}]=stock={row.stock!r}")
                stock = 0
            lookup.stock[target_id] = stock
            lookup.attributes[target_id] = ModelAttributes(
                size=row.size, color=row.color, rgb=row.rgb
            ).trimmed()
        return lookup

    def _resolve_cached(
        self,
        ctx: RequestContext,
        target_id: str,
        cache: AttributeCache,
        tally: _Tally,
    ) -> ModelAttributes:
        cached = cache.get(target_id)
        if cached is not None:
            return cached

        attrs = ModelAttributes()
        if self._attribute_resolver is not None:
            ctx.check()
            try:
                attrs = self._attribute_resolver.resolve(ctx, target_id).trimmed()
            except OperationCancelledError:
                raise
            except Exception as exc:
                logger.warning("Attributes unavailable for model %s: %s", target_id, exc)
                tally.problems.append(f"attrErr[{target_id}]={_one_line(exc)}")

        cache[target_id] = attrs
        return attrs


# --- Raw row readers ----------------------------------------------------------


def _as_mappings(raw_rows: Iterable[Mapping[str, Any]] | None) -> list[Mapping[str, Any]]:
    if raw_rows is None:
        return []
    rows = list(raw_rows)
    for position, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            raise ValidationError(
                f"Price row #{position} is malformed: expected a mapping, "
                f"got {type(row).__name__}"
            )
    return rows


def _read_str(row: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = row.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _read_int(row: Mapping[str, Any], keys: tuple[str, ...]) -> int | None:
    for key in keys:
        value = _coerce_int(row.get(key))
        if value is not None:
            return value
    return None


def _coerce_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _one_line(exc: Exception) -> str:
    return " ".join(str(exc).split()) or type(exc).__name__


def _diagnostic(row_count: int, source_used: bool, tally: _Tally) -> str:
    parts = [
        f"rows={row_count}",
        f"resolvedNonEmpty={tally.resolved_non_empty}",
        f"resolvedEmpty={tally.resolved_empty}",
        f"stockSource={'used' if source_used else 'fallback'}",
        f"stockFromSource={tally.stock_from_source}",
        f"stockFromRows={tally.stock_from_rows}",
    ]
    parts.extend(tally.problems)
    return " ".join(parts)
