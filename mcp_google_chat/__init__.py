# Copyright 2025 CNOE
# SPDX-License-Identifier: Apache-2.0

import logging
import sys
from typing import Literal

import click
from dotenv import load_dotenv

from .__about__ import __version__
from .api.client import get_api_context
from .config import AUTH_REMEDIATION
from .exceptions import AuthExchangeError, ConfigurationError
from .server import LogLevel, create_server

InputTransport = Literal["stdio", "sse", "http", "streamable-http"]  # Accepted via CLI (legacy includes 'http')
RuntimeTransport = Literal["stdio", "sse", "streamable-http"]  # Actual transports supported by FastMCP

__all__ = ["__version__", "main"]


@click.command()
@click.option("--port", default=8000, help="Port to listen on for SSE/HTTP", envvar="MCP_PORT")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "http", "streamable-http"]),
    default="stdio",
    envvar="MCP_MODE",
    help="Transport type",
)
@click.option("-v", "--verbose", count=True)
@click.option("--host", default="127.0.0.1", help="Host to listen on", envvar="MCP_HOST")
def main(verbose: int, transport: InputTransport, port: int, host: str) -> None:
    """Entry point for the Google Chat MCP server.

    Parameters:
      verbose: Verbosity flag count (-v / -vv) mapping to log level.
      transport: CLI selected transport (may include legacy 'http').
      port: Port to bind for SSE/HTTP transports.
      host: Host interface to bind.
    """
    load_dotenv()

    logging_level = logging.WARN
    if verbose == 1:
        logging_level = logging.INFO
    elif verbose >= 2:
        logging_level = logging.DEBUG
    logging.basicConfig(level=logging_level, stream=sys.stderr)

    # Credentials are checked before serving so a misconfigured process exits immediately
    try:
        context = get_api_context()
    except (ConfigurationError, AuthExchangeError) as e:
        click.echo(f"Error: {e}", err=True)
        if str(e) != AUTH_REMEDIATION:
            click.echo(AUTH_REMEDIATION, err=True)
        sys.exit(1)

    # Map 'http' to FastMCP 'streamable-http' without mutating input param
    if transport == "http":
        selected_transport: RuntimeTransport = "streamable-http"
    else:
        selected_transport = transport  # type: ignore[assignment]

    log_levels: dict[int, LogLevel] = {0: "WARNING", 1: "INFO", 2: "DEBUG"}
    log_level: LogLevel = log_levels.get(verbose, "DEBUG")

    server = create_server(
        host=host,
        port=port,
        log_level=log_level,
        debug=logging_level == logging.DEBUG,
    )

    logging.getLogger("mcp-google-chat").info(
        f"Starting Google Chat MCP server ({selected_transport}, {context.strategy.kind.value if context.strategy else 'injected'})"
    )
    server.run(transport=selected_transport)


if __name__ == "__main__":
    main()
