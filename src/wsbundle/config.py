"""Configuration for wsbundle.

Constants are immutable and defined at module level. Runtime settings come
from the environment via `Settings.from_env()`; CLI options override them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final, Mapping

# Version tag written as the first field of every persisted bundle record.
# Increment when the record layout changes.
RECORD_FORMAT_VERSION: Final[int] = 1

DIRECTIVE_MARKER: Final[str] = "--#"

EXPORT_HEADER: Final[tuple[str, ...]] = (
    "-- generated by wsbundle",
    "-- https://github.com/wsbundle/wsbundle",
)

STEAM_FILEDETAILS_URL: Final[str] = "https://steamcommunity.com/sharedfiles/filedetails/?id={id}"

# Remote file type a collection check must report.
COLLECTION_FILE_TYPE: Final[str] = "Collection"

DEFAULT_CACHE_MAX_AGE: Final[int] = 600
DEFAULT_LOOKUP_TIMEOUT: Final[float] = 30.0

ENV_DATA_DIR: Final[str] = "WSBUNDLE_DATA_DIR"
ENV_LOOKUP_TIMEOUT: Final[str] = "WSBUNDLE_LOOKUP_TIMEOUT"
ENV_CACHE_MAX_AGE: Final[str] = "WSBUNDLE_CACHE_MAX_AGE"


def _parse_timeout(raw: str, *, where: str) -> float | None:
    s = raw.strip().lower()
    if s in {"", "none", "0"}:
        return None
    try:
        value = float(s)
    except ValueError as e:
        raise ValueError(f"{where}: expected seconds or 'none', got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{where}: must be >= 0, got {raw!r}")
    return value or None


def _parse_int(raw: str, *, where: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ValueError(f"{where}: expected an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{where}: must be >= 0, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    # None waits for the remote indefinitely.
    lookup_timeout: float | None = DEFAULT_LOOKUP_TIMEOUT
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE

    @property
    def bundles_dir(self) -> Path:
        return self.data_dir / "bundles"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        data_dir = Path(env[ENV_DATA_DIR]).expanduser() if env.get(ENV_DATA_DIR) else Path.home() / ".wsbundle"

        lookup_timeout: float | None = DEFAULT_LOOKUP_TIMEOUT
        if ENV_LOOKUP_TIMEOUT in env:
            lookup_timeout = _parse_timeout(env[ENV_LOOKUP_TIMEOUT], where=ENV_LOOKUP_TIMEOUT)

        cache_max_age = DEFAULT_CACHE_MAX_AGE
        if ENV_CACHE_MAX_AGE in env:
            cache_max_age = _parse_int(env[ENV_CACHE_MAX_AGE], where=ENV_CACHE_MAX_AGE)

        return cls(data_dir=data_dir, lookup_timeout=lookup_timeout, cache_max_age=cache_max_age)

    def with_overrides(
        self,
        *,
        data_dir: str | Path | None = None,
        lookup_timeout: str | None = None,
    ) -> "Settings":
        out = self
        if data_dir is not None:
            out = replace(out, data_dir=Path(data_dir).expanduser())
        if lookup_timeout is not None:
            out = replace(out, lookup_timeout=_parse_timeout(lookup_timeout, where="--lookup-timeout"))
        return out
