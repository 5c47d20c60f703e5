"""CLI commands for the ProductDesign aggregate."""

from __future__ import annotations

import click

from designcat.application.dto import DesignDTO
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import DomainException
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.service.reference_set_service import references_from_ids
from designcat.infrastructure.bootstrap import design_queries, lifecycle_manager

company_option = click.option(
    "--company", required=True, help="Company (tenant) ID of the caller."
)
id_option = click.option("--id", "design_id", required=True, help="Product design ID.")
actor_option = click.option("--by", "actor", default=None, help="Member performing the change.")


def _parse_models(raw: str | None) -> list[str]:
    """Parse 'm1,m2,m3' into an ordered id list."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",")]


def _display_design(dto: DesignDTO) -> None:
    click.echo(f"Product design #{dto.id}  (status={dto.status}, printed={dto.printed})")
    click.echo(f"Name:     {dto.product_name}")
    click.echo(f"Brand:    {dto.brand_id or '-'}")
    click.echo(f"Updated:  {dto.updated_at or '-'} by {dto.updated_by or '-'}")
    if dto.expires_at:
        click.echo(f"Expires:  {dto.expires_at}")
    click.echo()
    if not dto.model_ids:
        click.echo("  (no models)")
        return
    click.echo(f"  {'Order':>5}  {'Model':<30}")
    click.echo(f"  {'-'*37}")
    for order, model_id in enumerate(dto.model_ids, start=1):
        click.echo(f"  {order:>5}  {model_id:<30}")


@click.command("create")
@company_option
@click.option("--name", required=True, help="Product name.")
@click.option("--brand", default="", help="Brand ID.")
@click.option("--assignee", default="", help="Assignee member ID.")
@click.option("--models", default=None, help="Model IDs in display order, as 'm1,m2'.")
@actor_option
def design_create(
    company: str,
    name: str,
    brand: str,
    assignee: str,
    models: str | None,
    actor: str | None,
) -> None:
    """Create a new product design."""
    ctx = RequestContext(company_id=company, actor_id=actor)

    try:
        draft = ProductDesign.draft(
            product_name=name,
            brand_id=brand,
            assignee_id=assignee,
            references=references_from_ids(_parse_models(models)),
            created_by=actor,
        )
        design = lifecycle_manager().create(ctx, draft)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product design #{design.id} created.")
    _display_design(DesignDTO.from_domain(design))


@click.command("update")
@company_option
@id_option
@click.option("--name", required=True, help="Product name.")
@click.option("--brand", default="", help="Brand ID.")
@click.option("--assignee", default="", help="Assignee member ID.")
@click.option("--models", default=None, help="Model IDs in display order, as 'm1,m2'.")
@click.option("--version", "version", default=0, type=int, help="Expected version (0 = latest).")
@actor_option
def design_update(
    company: str,
    design_id: str,
    name: str,
    brand: str,
    assignee: str,
    models: str | None,
    version: int,
    actor: str | None,
) -> None:
    """Update the content of a product design.

    Without --models the current model references are kept.
    """
    ctx = RequestContext(company_id=company, actor_id=actor)

    try:
        if models is None:
            references = design_queries().get(ctx, design_id).references
        else:
            references = tuple(references_from_ids(_parse_models(models)))

        payload = ProductDesign(
            id=design_id,
            company_id="",
            product_name=name,
            brand_id=brand,
            assignee_id=assignee,
            references=references,
            updated_by=actor,
            version=version,
        )
        design = lifecycle_manager().update(ctx, payload)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product design #{design.id} updated (version {design.version}).")


@click.command("delete")
@company_option
@id_option
@click.option("--by", "actor", required=True, help="Member performing the delete.")
def design_delete(company: str, design_id: str, actor: str) -> None:
    """Soft-delete a product design."""
    ctx = RequestContext(company_id=company, actor_id=actor)

    try:
        design = lifecycle_manager().soft_delete_with_models(ctx, design_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product design #{design.id} deleted; purge after {design.expires_at:%Y-%m-%d}.")


@click.command("restore")
@company_option
@id_option
@actor_option
def design_restore(company: str, design_id: str, actor: str | None) -> None:
    """Restore a soft-deleted product design."""
    ctx = RequestContext(company_id=company, actor_id=actor)

    try:
        lifecycle_manager().restore_with_models(ctx, design_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product design #{design_id} restored.")


@click.command("mark-printed")
@company_option
@id_option
@actor_option
def design_mark_printed(company: str, design_id: str, actor: str | None) -> None:
    """Mark a product design as printed."""
    ctx = RequestContext(company_id=company, actor_id=actor)

    try:
        lifecycle_manager().mark_printed(ctx, design_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product design #{design_id} marked as printed.")


@click.command("append-models")
@company_option
@id_option
@click.option("--models", required=True, help="Model IDs to append, as 'm1,m2'.")
def design_append_models(company: str, design_id: str, models: str) -> None:
    """Append models after the existing ones."""
    ctx = RequestContext(company_id=company)

    try:
        design = lifecycle_manager().append_model_refs(ctx, design_id, _parse_models(models))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_design(DesignDTO.from_domain(design))


@click.command("show")
@company_option
@id_option
def design_show(company: str, design_id: str) -> None:
    """Show a product design."""
    ctx = RequestContext(company_id=company)

    try:
        design = design_queries().get(ctx, design_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_design(DesignDTO.from_domain(design))


@click.command("list")
@company_option
@click.option("--deleted", is_flag=True, default=False, help="Only soft-deleted designs.")
@click.option("--printed", is_flag=True, default=False, help="Only printed designs.")
def design_list(company: str, deleted: bool, printed: bool) -> None:
    """List the product designs of a company."""
    if deleted and printed:
        raise click.ClickException("--deleted and --printed are mutually exclusive")

    ctx = RequestContext(company_id=company)
    queries = design_queries()

    try:
        if deleted:
            designs = queries.list_deleted(ctx)
        elif printed:
            designs = queries.list_printed(ctx)
        else:
            designs = queries.list(ctx)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not designs:
        click.echo("No product designs found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Models':>6} {'Printed':>8}")
    click.echo("-" * 47)
    for d in designs:
        click.echo(
            f"{d.id:<6} {d.product_name:<24} {len(d.references):>6} {str(d.printed):>8}"
        )


@click.command("history")
@company_option
@id_option
def design_history(company: str, design_id: str) -> None:
    """Show the change history of a product design, newest first."""
    ctx = RequestContext(company_id=company)

    try:
        versions = design_queries().list_history(ctx, design_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Updated':<22} {'By':<16} {'Status':<8} {'Models':>6}")
    click.echo("-" * 55)
    for design in versions:
        dto = DesignDTO.from_domain(design)
        click.echo(
            f"{dto.updated_at:<22} {dto.updated_by or '-':<16} {dto.status:<8} {len(dto.model_ids):>6}"
        )
