"""CLI commands for listings."""

from __future__ import annotations

import click

from designcat.domain.context import RequestContext
from designcat.domain.exceptions import DomainException
from designcat.infrastructure.bootstrap import listing_detail_handler


def _fmt_optional(value: int | None) -> str:
    return "-" if value is None else str(value)


@click.command("show")
@click.option("--company", required=True, help="Company (tenant) ID of the caller.")
@click.option("--id", "listing_id", required=True, help="Listing ID to display.")
def listing_show(company: str, listing_id: str) -> None:
    """Show a listing with resolved stock, size and colour."""
    ctx = RequestContext(company_id=company)

    try:
        dto = listing_detail_handler().handle(ctx, listing_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Listing {dto.id}  {dto.title}")
    click.echo(f"Design:  {dto.design_id or '-'}")
    click.echo()
    click.echo(f"  {'Order':>5} {'Model':<16} {'Size':<6} {'Color':<10} {'Price':>8} {'Stock':>6}")
    click.echo(f"  {'-'*56}")
    for row in dto.price_rows:
        click.echo(
            f"  {_fmt_optional(row.display_order):>5} {row.target_id:<16} "
            f"{row.size or '-':<6} {row.color or '-':<10} "
            f"{_fmt_optional(row.price):>8} {row.stock:>6}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Total stock':<49} {dto.total_stock:>6}")
