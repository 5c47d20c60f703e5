"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from designcat.domain.model.product_design import ProductDesign


@dataclass(frozen=True)
class DetailPriceRow:
    """Output: one resolved price row of a listing detail.

    ``display_order`` is None when the model is not referenced by the
    design (unknown, not zero).
    """

    target_id: str
    display_order: int | None
    stock: int
    price: int | None
    size: str = ""
    color: str = ""
    rgb: int | None = None


@dataclass(frozen=True)
class DetailPriceResult:
    rows: list[DetailPriceRow]
    total_stock: int
    diagnostic: str


@dataclass(frozen=True)
class ListingDetailDTO:
    """Output: a listing with its resolved price rows."""

    id: str
    title: str
    design_id: str
    stock_source_id: str
    price_rows: list[DetailPriceRow]
    total_stock: int


@dataclass(frozen=True)
class DesignDTO:
    """Output: a product design as displayed to the user."""

    id: str
    company_id: str
    product_name: str
    brand_id: str
    model_ids: list[str]
    printed: bool
    status: str
    updated_at: str
    updated_by: str
    expires_at: str

    @staticmethod
    def from_domain(design: ProductDesign) -> DesignDTO:
        return DesignDTO(
            id=design.id,
            company_id=design.company_id,
            product_name=design.product_name,
            brand_id=design.brand_id,
            model_ids=[ref.target_id for ref in design.references],
            printed=design.printed,
            status="DELETED" if design.is_deleted else "ACTIVE",
            updated_at=_fmt(design.updated_at),
            updated_by=design.updated_by or "",
            expires_at=_fmt(design.expires_at),
        )


def _fmt(value) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M UTC")
