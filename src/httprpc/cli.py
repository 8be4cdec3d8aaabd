"""Typer-based CLI for httprpc.

stdout carries only the call result (as JSON) so it can be piped.
Logging goes to stderr and, optionally, to a rotating log file.
"""

import asyncio
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import httpx
import typer

from httprpc import __version__
from httprpc.client import RpcClient
from httprpc.config import ClientConfig
from httprpc.errors import RpcClientUnknownError, RpcResponseError

app = typer.Typer(
    name="httprpc",
    help="Call JSON-RPC methods over HTTP",
    add_completion=False,
)

EXIT_RPC_ERROR = 1
EXIT_TRANSPORT_ERROR = 2

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def parse_param(raw: str) -> Any:
    """Parse a command-line parameter as JSON, falling back to the raw string.

    "42" -> 42, "true" -> True, '{"a": 1}' -> {"a": 1}, "0xabc" -> "0xabc"
    """
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure root logging: stderr always, plus an optional rotating file.

    Args:
        log_level: Logging level (debug, info, warning, error, critical)
        log_file: Log file path (parent directory created if missing)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    # Clear existing handlers to prevent duplicates
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(stderr_handler)

    if log_file is not None:
        log_file = log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # 10MB max, 3 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            ),
        )
        root_logger.addHandler(file_handler)


def validate_log_level(value: str) -> str:
    """Typer callback accepting only the documented log level names."""
    level = value.lower()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of: {', '.join(LOG_LEVELS)}")
    return level


async def run_call(
    config: ClientConfig,
    method: str,
    params: list[Any],
    route: str | None = None,
    notify: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Open a client, perform one call and close the client again.

    Returns:
        The call result, or None for notifications.
    """
    async with RpcClient.from_config(config, transport=transport) as client:
        if notify:
            await client.notify(method, *params, route=route)
            return None
        return await client.call(method, *params, route=route)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
) -> None:
    """Call JSON-RPC methods over HTTP."""
    if version:
        typer.echo(f"httprpc {__version__}")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def call(
    method: str = typer.Argument(..., help="JSON-RPC method name"),
    params: list[str] | None = typer.Argument(
        None,
        help="Positional parameters, each parsed as JSON (raw string otherwise)",
    ),
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Endpoint URL (default: HTTPRPC_URL env var)",
    ),
    route: str | None = typer.Option(
        None,
        "--route",
        "-r",
        help="Path appended to the endpoint URL for this call",
    ),
    authorization: str | None = typer.Option(
        None,
        "--authorization",
        help="Authorization header value (default: HTTPRPC_AUTHORIZATION env var)",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds",
    ),
    notify: bool = typer.Option(
        False,
        "--notify",
        help="Discard the result and print nothing on success",
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        callback=validate_log_level,
        help="Logging level (debug, info, warning, error, critical)",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file",
    ),
) -> None:
    """Call METHOD on the endpoint and print the result as JSON."""
    setup_logging(log_level, log_file)
    logger = logging.getLogger(__name__)

    try:
        config = ClientConfig.from_env(
            base_url=url, authorization=authorization, timeout=timeout
        )
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_TRANSPORT_ERROR)

    values = [parse_param(raw) for raw in params or []]
    logger.info(f"Calling {method} on {config.base_url} with {len(values)} param(s)")

    try:
        result = asyncio.run(run_call(config, method, values, route=route, notify=notify))
    except RpcResponseError as exc:
        typer.secho(
            f"RPC error {exc.code}: {exc.message}", fg=typer.colors.RED, err=True
        )
        if exc.data is not None:
            typer.echo(json.dumps(exc.data), err=True)
        raise typer.Exit(EXIT_RPC_ERROR)
    except RpcClientUnknownError as exc:
        typer.secho(
            f"Transport error: {exc.cause!r}", fg=typer.colors.RED, err=True
        )
        raise typer.Exit(EXIT_TRANSPORT_ERROR)

    if not notify:
        typer.echo(json.dumps(result))
