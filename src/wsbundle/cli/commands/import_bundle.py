"""`wsbundle import` / `wsbundle paste` commands.

Both parse Lua bundle text, resolve the optional `--# collection` against the
workshop (best-effort) and store the result under a new id, which is printed.
"""

from __future__ import annotations

import sys

import typer

from wsbundle.cli._context import fail, get_service
from wsbundle.core.errors import BundleError


def register(app: typer.Typer) -> None:
    @app.command("import")
    def import_bundle(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Path to a Lua bundle file."),
    ) -> None:
        """Import a Lua bundle file."""
        service = get_service(ctx)
        try:
            bundle = service.import_bundle(path)
        except BundleError as e:
            fail(e)
        typer.echo(str(bundle.id))

    @app.command("paste")
    def paste(ctx: typer.Context) -> None:
        """Import bundle text read from stdin."""
        text = sys.stdin.read()
        service = get_service(ctx)
        try:
            bundle = service.paste_bundle(text)
        except BundleError as e:
            fail(e)
        typer.echo(str(bundle.id))
