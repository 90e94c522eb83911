"""Quickcheck workspace: paste -> store -> export -> reimport -> compare.

This workspace is self-contained (no network, no repo-level assets). It uses a
small synthetic bundle script and an offline collection catalog, stores the
bundle under `workspaces/00_quickcheck_import_export/outputs/data/bundles/`,
exports it back to Lua, re-imports the export, and writes a JSON report.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from wsbundle.remote.catalog import CatalogWorkshop
from wsbundle.remote.lookup import CollectionLookup
from wsbundle.service import BundleService
from wsbundle.store.bundles import BundleStore


def _fixture_bundle_text() -> str:
    return "\n".join(
        [
            "-- hand-written server pack",
            "--# bundle",
            "--# name Quickcheck Pack",
            "--# collection 900",
            "--# updated Mon, 01 Jan 2024 00:00:00 +0000",
            "for _,w in ipairs({",
            '"160250458", -- Wiremod',
            '"104691717", -- PAC3',
            "[[3]]",
            "}) do resource.AddWorkshop(w) end",
        ]
    ) + "\n"


def _fixture_catalog() -> dict[str, Any]:
    return {
        "900": {
            "title": "Quickcheck Collection",
            "file_type": "Collection",
            "children": ["104691717", "555"],
        },
    }


def _write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def main() -> None:
    here = Path(__file__).resolve().parent
    outputs = here / "outputs"
    outputs.mkdir(parents=True, exist_ok=True)

    store = BundleStore.open(outputs / "data" / "bundles")
    lookup = CollectionLookup(CatalogWorkshop.from_json_dict(_fixture_catalog()))
    service = BundleService(store, lookup)

    original = service.paste_bundle(_fixture_bundle_text())

    export_path = outputs / "export.lua"
    service.export_bundle(
        original.id,
        item_names={160250458: "Wiremod", 104691717: "PAC3"},
        collection_title="Quickcheck Collection",
        out=export_path,
    )

    reimported = service.import_bundle(export_path)

    ok_name = reimported.name == original.name
    ok_collection = (
        original.collection is not None
        and reimported.collection is not None
        and reimported.collection.id == original.collection.id
    )
    ok_items = sorted(reimported.all_items()) == sorted(original.all_items())

    report = {
        "store_root": str(store.root),
        "export_path": str(export_path),
        "original_id": original.id,
        "reimported_id": reimported.id,
        "name_equal": ok_name,
        "collection_equal": ok_collection,
        "items_equal": ok_items,
        "include": [str(x) for x in (original.collection.include if original.collection else ())],
        "exclude": [str(x) for x in (original.collection.exclude if original.collection else ())],
    }
    _write_json(outputs / "roundtrip_report.json", report)

    if not (ok_name and ok_collection and ok_items):
        raise SystemExit("roundtrip failed; see outputs/roundtrip_report.json")


if __name__ == "__main__":
    main()
