from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from renecsync.app import sync_registry, validate_registry
from renecsync.config import ConfigurationError, configure_logging
from renecsync.domain.extracts import MandatoryExtractMissingError
from renecsync.domain.validation import render_report

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-batch progress and skip reasons",
    )

    parser = argparse.ArgumentParser(description="Reconcile RENEC registry extracts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync",
        parents=[common],
        help="Load the registry extracts and reconcile them into the store",
    )
    sync.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the extract files (defaults to config)",
    )

    subparsers.add_parser(
        "validate",
        parents=[common],
        help="Report coverage and referential integrity of the store",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "sync":
            result = sync_registry(data_dir=parsed_args.data_dir)
            if result.errors:
                log.warning("Sync completed with %d step error(s)", len(result.errors))
        elif parsed_args.command == "validate":
            report = validate_registry()
            print(render_report(report))  # noqa: T201
            if report.failed:
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except MandatoryExtractMissingError as exc:
        log.error("Cannot sync: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env`` and run the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
