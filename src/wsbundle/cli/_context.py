"""Shared CLI state: lazily builds the service from global options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NoReturn, Optional

import typer

from wsbundle.config import Settings
from wsbundle.core.errors import BundleError
from wsbundle.core.model import U64_MAX
from wsbundle.remote.catalog import CatalogWorkshop
from wsbundle.remote.lookup import CollectionLookup
from wsbundle.service import BundleService
from wsbundle.store.bundles import BundleStore


@dataclass
class CliState:
    data_dir: Optional[str] = None
    catalog: Optional[str] = None
    lookup_timeout: Optional[str] = None
    _service: Optional[BundleService] = field(default=None, repr=False)

    def settings(self) -> Settings:
        try:
            return Settings.from_env().with_overrides(data_dir=self.data_dir, lookup_timeout=self.lookup_timeout)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

    def service(self) -> BundleService:
        if self._service is None:
            settings = self.settings()
            if self.catalog:
                try:
                    client = CatalogWorkshop.from_path(self.catalog)
                except (OSError, ValueError) as e:
                    raise typer.BadParameter(f"--catalog: {e}") from e
            else:
                client = CatalogWorkshop({})
            try:
                store = BundleStore.open(settings.bundles_dir)
            except BundleError as e:
                fail(e)
            lookup = CollectionLookup(
                client,
                timeout=settings.lookup_timeout,
                cache_max_age=settings.cache_max_age,
            )
            self._service = BundleService(store, lookup)
        return self._service


def get_service(ctx: typer.Context) -> BundleService:
    state = ctx.find_object(CliState)
    if state is None:
        state = CliState()
        ctx.obj = state
    return state.service()


def fail(error: BundleError) -> NoReturn:
    """Report a bundle error on stderr and exit with status 1.

    The line always starts with the error's stable code.
    """
    message = str(error)
    if not message.startswith(error.code):
        message = f"{error.code}: {message}"
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=1)


def parse_id(value: str, *, option: str) -> int:
    s = value.strip()
    if not s or not s.isascii() or not s.isdigit():
        raise typer.BadParameter(f"{option}: expected a numeric id, got {value!r}")
    parsed = int(s)
    if parsed > U64_MAX:
        raise typer.BadParameter(f"{option}: id {s} is out of range")
    return parsed
