"""`wsbundle check-collection` command: print collection metadata as JSON."""

from __future__ import annotations

import json

import typer

from wsbundle.cli._context import fail, get_service, parse_id
from wsbundle.core.errors import BundleError


def register(app: typer.Typer) -> None:
    @app.command("check-collection")
    def check_collection(
        ctx: typer.Context,
        collection: str = typer.Argument(..., help="Workshop collection id."),
        children: bool = typer.Option(False, "--children", help="Include the collection's member ids."),
    ) -> None:
        """Verify that an id is a workshop collection."""
        collection_id = parse_id(collection, option="COLLECTION")
        service = get_service(ctx)
        try:
            data = service.check_bundle_collection(collection_id, with_children=children)
        except BundleError as e:
            fail(e)
        typer.echo(json.dumps(data.to_json_dict(), indent=2, sort_keys=True))
