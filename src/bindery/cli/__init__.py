# ABOUTME: CLI package for Bindery, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from bindery.cli.commands import (
    convert_cmd,
    edit_cmd,
    import_cmd,
    info_cmd,
    init_cmd,
    ls_cmd,
    merge_cmd,
    search_cmd,
    verify_cmd,
)


@click.group()
@click.version_option(package_name="bindery")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log what the library is doing.")
def cli(verbose: bool) -> None:
    """Bindery - a personal ebook catalog."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


cli.add_command(init_cmd.init)
cli.add_command(import_cmd.import_command)
cli.add_command(search_cmd.search)
cli.add_command(info_cmd.info)
cli.add_command(ls_cmd.ls)
cli.add_command(edit_cmd.edit)
cli.add_command(merge_cmd.merge)
cli.add_command(convert_cmd.convert)
cli.add_command(verify_cmd.verify)
