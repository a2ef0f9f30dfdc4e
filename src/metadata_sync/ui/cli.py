from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from metadata_sync.app import apply_metadata, fetch_table_snapshot, load_declared_tables
from metadata_sync.config import ConfigurationError, configure_logging, get_metadata_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Converge Hasura table metadata")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every metadata command that is sent",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    apply = subparsers.add_parser("apply", help="Track tables and create relationships")
    apply.add_argument(
        "tables",
        type=Path,
        help="JSON file holding the list of declared tables",
    )
    apply.add_argument(
        "--db-name",
        type=str,
        help="Metadata source name (defaults to HASURA_DB_NAME or 'default')",
    )
    apply.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (defaults to HASURA_METADATA_TIMEOUT or 10)",
    )

    snapshot = subparsers.add_parser("snapshot", help="List the tables currently tracked")
    snapshot.add_argument(
        "--db-name",
        type=str,
        help="Metadata source name (defaults to HASURA_DB_NAME or 'default')",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if getattr(parsed_args, "timeout", None) is not None and parsed_args.timeout <= 0:
            raise ConfigurationError("Timeout must be positive")  # noqa: TRY301
        config = get_metadata_config(
            db_name=parsed_args.db_name,
            timeout_seconds=getattr(parsed_args, "timeout", None),
        )
        tables = (
            load_declared_tables(parsed_args.tables, default_source=config.db_name)
            if parsed_args.command == "apply"
            else []
        )
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "apply":
            result = apply_metadata(tables, config=config)
            log.info(
                "Applied %s tables to %s: %s newly tracked, %s customized, "
                "%s relationships created, %s already present",
                len(tables),
                config.db_name,
                len(result.tracked),
                len(result.customized),
                len(result.relationships_created),
                len(result.relationships_existing),
            )
            if not result.baseline_available:
                log.warning("Existing metadata was unavailable; configurations were overwritten")
        elif parsed_args.command == "snapshot":
            snapshot = fetch_table_snapshot(config=config)
            for table, existing in sorted(snapshot.items(), key=lambda item: str(item[0])):
                log.info(
                    "%s: customized=%s, object_relationships=%s, array_relationships=%s",
                    table,
                    existing.configuration is not None,
                    len(existing.object_relationships),
                    len(existing.array_relationships),
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error while converging metadata")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
