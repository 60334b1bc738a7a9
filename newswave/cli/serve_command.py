"""Serve command implementation."""
import asyncio
import logging
from typing import Optional

import typer

from ..lib.console import echo_with_prefix, safe_echo
from ..services.proxy_server import run_server
from .context import load_cli_config

logger = logging.getLogger(__name__)


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: proxy.host)"),
    port: Optional[int] = typer.Option(None, "--port", min=1, max=65535, help="Bind port (default: proxy.port)"),
):
    """Run the headlines proxy that injects the API key server-side."""
    try:
        config = asyncio.run(load_cli_config())
    except Exception as e:
        safe_echo(f"[ERROR] Failed to load configuration: {e!s}")
        logger.error(f"Serve command failed: {e}")
        raise typer.Exit(1)

    if not config.get("news.api_key"):
        safe_echo("[WARNING] API key is not set; every headlines request will return HTTP 500")

    bind_host = host or config.get("proxy.host")
    bind_port = port or int(config.get("proxy.port", 8888))
    echo_with_prefix("PROXY", f"Serving GET {config.get('proxy.path')} on http://{bind_host}:{bind_port}")

    run_server(config, host=bind_host, port=bind_port)
