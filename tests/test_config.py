from __future__ import annotations

from pathlib import Path

import pytest

from wsbundle.config import DEFAULT_CACHE_MAX_AGE, DEFAULT_LOOKUP_TIMEOUT, Settings


def test_settings_defaults() -> None:
    settings = Settings.from_env({})

    assert settings.data_dir == Path.home() / ".wsbundle"
    assert settings.bundles_dir == settings.data_dir / "bundles"
    assert settings.lookup_timeout == DEFAULT_LOOKUP_TIMEOUT
    assert settings.cache_max_age == DEFAULT_CACHE_MAX_AGE


def test_settings_from_env(tmp_path: Path) -> None:
    settings = Settings.from_env(
        {
            "WSBUNDLE_DATA_DIR": str(tmp_path),
            "WSBUNDLE_LOOKUP_TIMEOUT": "none",
            "WSBUNDLE_CACHE_MAX_AGE": "0",
        }
    )

    assert settings.data_dir == tmp_path
    assert settings.lookup_timeout is None
    assert settings.cache_max_age == 0


def test_settings_overrides(tmp_path: Path) -> None:
    settings = Settings.from_env({}).with_overrides(data_dir=tmp_path, lookup_timeout="2.5")

    assert settings.data_dir == tmp_path
    assert settings.lookup_timeout == 2.5


@pytest.mark.parametrize(
    "env",
    [
        {"WSBUNDLE_LOOKUP_TIMEOUT": "soon"},
        {"WSBUNDLE_LOOKUP_TIMEOUT": "-1"},
        {"WSBUNDLE_CACHE_MAX_AGE": "ten"},
    ],
)
def test_settings_reject_bad_values(env: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(env)
