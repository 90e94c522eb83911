"""wsbundle CLI entrypoint.

Global options select the data directory, an optional offline workshop
catalog (JSON) and the remote lookup timeout. Without `--catalog` every
collection lookup reports `FileNotFound`.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from wsbundle.cli._context import CliState

app = typer.Typer(
    name="wsbundle",
    add_completion=False,
    no_args_is_help=True,
    help="Manage Garry's Mod workshop bundles (Lua resource.AddWorkshop scripts).",
)


@app.callback()
def _callback(
    ctx: typer.Context,
    data_dir: Optional[str] = typer.Option(
        None, "--data-dir", help="Data directory (default: $WSBUNDLE_DATA_DIR or ~/.wsbundle)."
    ),
    catalog: Optional[str] = typer.Option(None, "--catalog", help="Offline workshop catalog JSON."),
    lookup_timeout: Optional[str] = typer.Option(
        None, "--lookup-timeout", help="Seconds to wait for a remote lookup ('none' waits forever)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """wsbundle CLI."""
    # Without -v, warnings reach stderr through logging's last-resort handler.
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = CliState(data_dir=data_dir, catalog=catalog, lookup_timeout=lookup_timeout)


@app.command("version")
def version() -> None:
    """Print the installed wsbundle version."""
    from wsbundle import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `wsbundle --help` is fast.
    """
    from wsbundle.cli.commands import check_collection as check_collection_cmd
    from wsbundle.cli.commands import export_bundle as export_bundle_cmd
    from wsbundle.cli.commands import import_bundle as import_bundle_cmd
    from wsbundle.cli.commands import manage as manage_cmd

    manage_cmd.register(app)
    import_bundle_cmd.register(app)
    export_bundle_cmd.register(app)
    check_collection_cmd.register(app)


_register_commands()
