"""`wsbundle export` command.

Renders a stored bundle as a Lua `resource.AddWorkshop` script. Item names for
the trailing `-- name` comments come from an optional JSON object mapping item
id to display name.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from wsbundle.cli._context import fail, get_service, parse_id
from wsbundle.core.errors import BundleError


def _read_item_names(path: str) -> dict[int, str]:
    try:
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"--names: {e}") from e
    if not isinstance(obj, dict):
        raise typer.BadParameter("--names: expected a JSON object of id -> name")
    out: dict[int, str] = {}
    for k, v in obj.items():
        out[parse_id(str(k), option="--names")] = str(v)
    return out


def register(app: typer.Typer) -> None:
    @app.command("export")
    def export(
        ctx: typer.Context,
        bundle_id: int = typer.Argument(..., help="Bundle id."),
        out: Optional[str] = typer.Option(None, "--out", help="Write to this file instead of stdout."),
        names: Optional[str] = typer.Option(None, "--names", help="JSON file mapping item id -> name."),
        collection_title: Optional[str] = typer.Option(
            None, "--collection-title", help="Title printed above the collection block."
        ),
    ) -> None:
        """Export a stored bundle as Lua."""
        item_names = _read_item_names(names) if names else None
        service = get_service(ctx)
        try:
            text = service.export_bundle(
                bundle_id,
                item_names=item_names,
                collection_title=collection_title,
                out=out,
            )
        except BundleError as e:
            fail(e)

        if out:
            typer.echo(str(out))
        else:
            typer.echo(text, nl=False)
