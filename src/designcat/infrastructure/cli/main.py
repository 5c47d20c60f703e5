import click

from designcat.infrastructure.cli.design_commands import (
    design_append_models,
    design_create,
    design_delete,
    design_history,
    design_list,
    design_mark_printed,
    design_restore,
    design_show,
    design_update,
)
from designcat.infrastructure.cli.listing_commands import listing_show
from designcat.infrastructure.config import get_settings
from designcat.infrastructure.logging_config import setup_logging


@click.group()
def cli() -> None:
    """designcat: product design catalog"""
    setup_logging(get_settings().log_level)


@cli.group()
def design() -> None:
    """Manage product designs."""


@cli.group()
def listing() -> None:
    """Inspect listings."""


# Register subcommands
design.add_command(design_append_models)
design.add_command(design_create)
design.add_command(design_delete)
design.add_command(design_history)
design.add_command(design_list)
design.add_command(design_mark_printed)
design.add_command(design_restore)
design.add_command(design_show)
design.add_command(design_update)
listing.add_command(listing_show)
