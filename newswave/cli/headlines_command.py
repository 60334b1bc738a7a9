"""Headlines command implementation."""
import asyncio
import json
import logging

import typer

from ..lib.console import safe_echo
from ..models.view_state import Category, RenderMode
from ..services.news_api_service import create_news_service
from ..services.view_controller import ViewStateController
from .context import load_cli_config
from .views import render_screen

logger = logging.getLogger(__name__)


def headlines(
    category: str = typer.Option("general", "--category", "-c", help=f"News category {Category.values()}"),
    search: str = typer.Option("", "--search", "-s", help="Filter titles by text (case-insensitive)"),
    direct: bool = typer.Option(
        False, "--direct", help="Call the news provider directly with the local API key"
    ),
    output: str = typer.Option("text", "--output", help="Output format [text|json]"),
):
    """Fetch and show top headlines."""
    try:
        selected = Category.parse(category)
    except ValueError:
        safe_echo(f"[ERROR] Unknown category '{category}'. Choose from: {', '.join(Category.values())}")
        raise typer.Exit(1)

    if output not in ("text", "json"):
        safe_echo(f"[ERROR] Unknown output format '{output}'")
        raise typer.Exit(1)

    try:
        controller = asyncio.run(_async_headlines(selected, search, direct))
    except Exception as e:
        safe_echo(f"[ERROR] Failed to fetch headlines: {e!s}")
        logger.error(f"Headlines command failed: {e}")
        raise typer.Exit(1)

    if output == "json":
        safe_echo(json.dumps(controller.state.to_dict(), ensure_ascii=False, indent=2))
    else:
        safe_echo(render_screen(controller))

    if controller.render_mode == RenderMode.ERROR:
        raise typer.Exit(1)


async def _async_headlines(category: Category, search: str, direct: bool) -> ViewStateController:
    """Async helper to fetch one category and apply the search term."""
    config = await load_cli_config()

    async with create_news_service(config, direct=True if direct else None) as service:
        controller = ViewStateController(service, category)
        await controller.select_category(category)
        if search:
            controller.set_search_term(search)
        return controller
