from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from kodikarr.domain.exceptions import KodikError
from kodikarr.infrastructure.config import AppConfig, load_config
from kodikarr.infrastructure.logging.setup import configure_logging
from kodikarr.interfaces.app import create_app
from kodikarr.interfaces.library import resolve_blocking

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="kodikarr")

    # Config wiring flags (shared by all commands)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Resolve one player page URL.")
    resolve.add_argument("url", help="Kodik player page URL (scheme optional).")
    resolve.add_argument(
        "--best",
        action="store_true",
        help="Print only the best-quality link instead of the full JSON.",
    )

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind host (overrides config).")
    serve.add_argument(
        "--port", default=None, type=int, help="Bind port (overrides config)."
    )

    return parser.parse_args(argv)


def _run_resolve(config: AppConfig, url: str, best: bool) -> int:
    try:
        response = resolve_blocking(url, config=config)
    except KodikError as exc:
        log.error("resolve_failed", url=url, kind=exc.kind.value, error=str(exc))
        print(f"error: {exc.kind.value}: {exc}", file=sys.stderr)
        return 1

    if best:
        best_link = response.best_link()
        if best_link is None:
            print("error: no links returned", file=sys.stderr)
            return 1
        print(best_link[1].src)
        return 0

    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then dispatches to the chosen command.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.command == "serve":
        if args.host:
            cli_overrides["api_host"] = args.host
        if args.port:
            cli_overrides["api_port"] = args.port

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )
    log_config = configure_logging(config)

    if args.command == "resolve":
        return _run_resolve(config, args.url, args.best)

    uvicorn.run(
        create_app(config),
        host=config.api_host,
        port=config.api_port,
        log_config=log_config,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
