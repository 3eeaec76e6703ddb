#!/usr/bin/env python3
"""Inspect and validate a UniCart storage directory.

Reads every slot in a :class:`unicart.FileStorage` directory, reports its
envelope version, and checks that the stored state still validates against
the current store models.  Useful before and after a schema change.

Usage
-----
::

    python scripts/inspect_slots.py ~/.unicart
    python scripts/inspect_slots.py ~/.unicart --json
    python scripts/inspect_slots.py ~/.unicart --upgrade   # rewrite legacy slots

Exit status is 1 when at least one slot fails validation.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import ValidationError  # noqa: E402

from unicart._constants import AUTH_SLOT, CART_SLOT, SEARCH_SLOT, STORAGE_VERSION, TOKEN_SLOT, WISHLIST_SLOT  # noqa: E402
from unicart.models._base import UnicartBaseModel  # noqa: E402
from unicart.state import AuthState, CartState, FileStorage, JsonSlotPersistence, SearchState, WishlistState  # noqa: E402

_STATE_MODELS: dict[str, type[UnicartBaseModel]] = {
    WISHLIST_SLOT: WishlistState,
    CART_SLOT: CartState,
    AUTH_SLOT: AuthState,
    SEARCH_SLOT: SearchState,
}


def _raw_version(text: str | None) -> Any:
    if text is None:
        return None
    try:
        payload = json.loads(text)
    except ValueError:
        return "<invalid json>"
    if isinstance(payload, dict) and "state" in payload and "version" in payload:
        return payload["version"]
    return 0


def inspect_slot(storage: FileStorage, slot: str, *, upgrade: bool) -> dict[str, Any]:
    report: dict[str, Any] = {"slot": slot}
    if slot == TOKEN_SLOT:
        # Raw bearer token, not a JSON envelope.
        report.update(version="-", status="ok", summary="bearer token present")
        return report

    report["version"] = _raw_version(storage.get_item(slot))
    model = _STATE_MODELS.get(slot)
    if model is None:
        report["status"] = "unknown"
        return report

    port = JsonSlotPersistence(storage, slot)
    state = port.load()
    if state is None:
        report["status"] = "unreadable"
        return report
    try:
        parsed = model.model_validate(state)
    except ValidationError as exc:
        report["status"] = "invalid"
        report["errors"] = exc.errors(include_url=False)
        return report

    report["status"] = "ok"
    items = getattr(parsed, "items", None)
    if items is not None:
        report["summary"] = f"{len(items)} item(s)"
    if upgrade and report["version"] != STORAGE_VERSION:
        port.save(parsed.model_dump(mode="json", by_alias=True))
        report["upgraded_to"] = STORAGE_VERSION
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("directory", type=Path, help="FileStorage directory")
    parser.add_argument("--json", action="store_true", help="Output as machine-readable JSON")
    parser.add_argument("--upgrade", action="store_true", help="Rewrite valid legacy slots with the current envelope")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    storage = FileStorage(args.directory)
    reports = [inspect_slot(storage, slot, upgrade=args.upgrade) for slot in storage.keys()]

    if args.json:
        print(json.dumps(reports, indent=2, default=str))
    else:
        if not reports:
            print(f"No slots in {args.directory}")
        for report in reports:
            line = f"{report['slot']:<20} v{report['version']!s:<4} {report['status']}"
            if "summary" in report:
                line += f"  ({report['summary']})"
            if "upgraded_to" in report:
                line += f"  upgraded to v{report['upgraded_to']}"
            print(line)
            for error in report.get("errors", []):
                print(f"    {'.'.join(str(part) for part in error['loc'])}: {error['msg']}")

    return 1 if any(report["status"] == "invalid" for report in reports) else 0


if __name__ == "__main__":
    sys.exit(main())
