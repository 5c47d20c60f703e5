"""Listing and stock-source read models.

A listing sells the models of one product design.  Its price rows are kept
exactly as the source delivered them (raw mappings, source order); only
detail resolution interprets them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Listing:
    id: str
    company_id: str
    design_id: str
    title: str = ""
    stock_source_id: str = ""
    price_rows: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StockSourceRow:
    """Authoritative stock for one model, with optional display attributes.

    ``stock`` is None when the source value could not be read as a count.
    """

    target_id: str
    stock: int | None
    size: str = ""
    color: str = ""
    rgb: int | None = None


@dataclass(frozen=True)
class StockSourceDetail:
    source_id: str
    rows: tuple[StockSourceRow, ...] = field(default_factory=tuple)
