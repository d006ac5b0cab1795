from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from minion import __version__
from minion.config import MinionSettings
from minion.errors import SourceError
from minion.logging_config import setup_logging
from minion.models import BatchSummary, Operation
from minion.orchestrator import build_orchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minion",
        description="iiko maintenance: extend API key expiration and refresh external menus",
    )
    parser.add_argument("--version", action="version", version=f"minion {__version__}")
    parser.add_argument("--config", "-c", default=None, help="Restaurant JSON file (file source)")
    parser.add_argument("--source", choices=["file", "database"], default=None, help="Where restaurants are loaded from")
    parser.add_argument("--workers", type=int, default=None, help="Restaurants processed in parallel")
    parser.add_argument("--log-level", default=None, help="Root log level (DEBUG, INFO, ...)")

    sub = parser.add_subparsers(dest="command", required=True)

    extend = sub.add_parser("extend-keys", help="Extend API key expiration up to the configured ceiling")
    extend.add_argument("--years", type=int, default=None, help="Override the extension policy in years")
    extend.add_argument("--json", action="store_true", help="Print the summary as JSON")

    refresh = sub.add_parser("refresh-menus", help="Trigger a refresh of every external menu")
    refresh.add_argument("--json", action="store_true", help="Print the summary as JSON")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def load_settings(args: argparse.Namespace) -> MinionSettings:
    overrides: dict[str, object] = {}
    if args.config:
        overrides["config_path"] = args.config
    if args.source:
        overrides["restaurant_source"] = args.source
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.log_level:
        overrides["log_level"] = args.log_level
    return MinionSettings(**overrides)


def run_batch(settings: MinionSettings, operation: Operation, years: int | None, as_json: bool) -> int:
    orchestrator = build_orchestrator(settings)
    try:
        if operation is Operation.EXTEND_KEYS:
            summary = orchestrator.extend_keys(years=years)
        else:
            summary = orchestrator.refresh_menus()
    except SourceError as exc:
        logger.error("Cannot load restaurants: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_summary(summary)
    return 0


def print_summary(summary: BatchSummary) -> None:
    label = summary.operation.item_label
    for outcome in summary.outcomes:
        if outcome.success:
            print(f"  ok    {outcome.name}: updated {outcome.updated_count} {label}")
        else:
            print(f"  fail  {outcome.name}: {outcome.error}")

    print("=" * 50)
    print(f"Restaurants processed: {summary.processed}")
    print(f"Succeeded:             {summary.succeeded}")
    print(f"Failed:                {summary.failed}")
    print(f"Total {label} updated: {summary.total_updated}")
    print(f"Duration:              {summary.duration_seconds:.2f}s")
    if summary.all_succeeded:
        print("All restaurants processed successfully")
    else:
        print("Finished with errors")


def serve(settings: MinionSettings, host: str | None, port: int | None) -> int:
    import uvicorn

    from minion_api.main import create_app

    uvicorn.run(
        create_app(settings),
        host=host or settings.http_host,
        port=port or settings.http_port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        sys.exit(1)

    # Keep stdout clean for --json output.
    setup_logging(settings.log_level, stream=sys.stderr if getattr(args, "json", False) else None)

    if args.command == "serve":
        code = serve(settings, args.host, args.port)
    elif args.command == "extend-keys":
        if args.years is not None and args.years < 1:
            parser.error("--years must be at least 1")
        code = run_batch(settings, Operation.EXTEND_KEYS, args.years, args.json)
    else:
        code = run_batch(settings, Operation.REFRESH_MENUS, None, args.json)
    sys.exit(code)


if __name__ == "__main__":
    main()
