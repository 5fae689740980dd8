from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from osmsync.app import export_element, export_elements, ingest_document
from osmsync.config import configure_logging
from osmsync.domain.ingest import require_category

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from osmsync.domain.model import ElementCategory

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile OSM and GeoJSON map data")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-element decisions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest a GeoJSON or Overpass JSON file")
    ingest.add_argument(
        "path",
        type=Path,
        help="File holding a FeatureCollection, an Overpass response or a list of elements",
    )
    ingest.add_argument(
        "--type",
        dest="category",
        type=str,
        help="Default element type for elements that carry an id but no type",
    )

    export = subparsers.add_parser("export", help="Print stored elements as GeoJSON")
    export.add_argument("category", type=str, help="Element type (node/way/relation or n/w/r)")
    export.add_argument(
        "osm_ids",
        type=int,
        nargs="+",
        help="OSM ids; several ids print a FeatureCollection",
    )

    return parser.parse_args(list(argv))


def _parse_category(value: str | None) -> ElementCategory | None:
    if value is None:
        return None
    return require_category(value)


def _load_document(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        category = _parse_category(parsed_args.category)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "ingest":
            report = ingest_document(_load_document(parsed_args.path), category=category)
            for skipped in report.skipped:
                log.warning(
                    "Element %s skipped (%s): %s", skipped.index, skipped.kind, skipped.message
                )
        elif parsed_args.command == "export":
            if category is None:
                raise ValueError("Missing element type")  # noqa: TRY301
            osm_ids: list[int] = parsed_args.osm_ids
            output: dict[str, Any] | None
            if len(osm_ids) > 1:
                output = export_elements(category, osm_ids)
            else:
                output = export_element(category, osm_ids[0])
            if output is None:
                log.error("Element %s/%s not found", category, osm_ids[0])
                sys.exit(1)
            sys.stdout.write(json.dumps(output) + "\n")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
