"""`wsbundle list|new|delete` commands."""

from __future__ import annotations

from email.utils import format_datetime
from typing import Optional

import typer

from wsbundle.cli._context import fail, get_service, parse_id
from wsbundle.core.errors import BundleError


def register(app: typer.Typer) -> None:
    @app.command("list")
    def list_bundles(ctx: typer.Context) -> None:
        """List stored bundles, oldest first."""
        for bundle in get_service(ctx).list_bundles():
            count = len(bundle.all_items())
            typer.echo(f"{bundle.id}\t{format_datetime(bundle.updated)}\t{count}\t{bundle.name}")

    @app.command("new")
    def new(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Bundle name."),
        collection: Optional[str] = typer.Option(
            None, "--collection", help="Seed the bundle from a workshop collection id."
        ),
    ) -> None:
        """Create an empty bundle, optionally based on a workshop collection."""
        collection_id = parse_id(collection, option="--collection") if collection is not None else None
        service = get_service(ctx)
        try:
            bundle = service.new_bundle(name, based_on_collection=collection_id)
        except BundleError as e:
            fail(e)
        typer.echo(str(bundle.id))

    @app.command("delete")
    def delete(
        ctx: typer.Context,
        bundle_id: int = typer.Argument(..., help="Bundle id."),
    ) -> None:
        """Delete a stored bundle."""
        service = get_service(ctx)
        try:
            service.delete_bundle(bundle_id)
        except BundleError as e:
            fail(e)
        typer.echo("OK")
