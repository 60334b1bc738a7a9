"""Interactive browse command implementation."""
import asyncio
import logging

import typer

from ..lib.console import safe_echo
from ..models.view_state import Category, RenderMode
from ..services.news_api_service import create_news_service
from ..services.view_controller import ViewStateController
from .context import load_cli_config
from .views import render_screen

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: <number> open article | b back | /<text> search (/ clears) | "
    "c <category> switch category | q quit"
)


def browse(
    category: str = typer.Option("general", "--category", "-c", help=f"Initial category {Category.values()}"),
    direct: bool = typer.Option(
        False, "--direct", help="Call the news provider directly with the local API key"
    ),
):
    """Browse headlines interactively."""
    try:
        selected = Category.parse(category)
    except ValueError:
        safe_echo(f"[ERROR] Unknown category '{category}'. Choose from: {', '.join(Category.values())}")
        raise typer.Exit(1)

    try:
        asyncio.run(_async_browse(selected, direct))
    except (KeyboardInterrupt, typer.Abort):
        safe_echo("")
    except Exception as e:
        safe_echo(f"[ERROR] Browse failed: {e!s}")
        logger.error(f"Browse command failed: {e}")
        raise typer.Exit(1)


async def _async_browse(category: Category, direct: bool) -> None:
    config = await load_cli_config()

    async with create_news_service(config, direct=True if direct else None) as service:
        controller = ViewStateController(service, category)
        await controller.select_category(category)

        while True:
            safe_echo(render_screen(controller))
            safe_echo(HELP_TEXT)
            line = typer.prompt(">", default="", show_default=False)
            if not await handle_command(controller, line):
                break


async def handle_command(controller: ViewStateController, line: str) -> bool:
    """
    執行一行互動指令.

    Args:
        controller: 畫面狀態控制器
        line: 使用者輸入

    Returns:
        bool: False 表示結束瀏覽
    """
    command = line.strip()

    if command.lower() in ("q", "quit", "exit"):
        return False

    if command.lower() in ("b", "back"):
        controller.go_back()
        return True

    if command.startswith("/"):
        controller.set_search_term(command[1:].strip())
        return True

    if command.lower().startswith("c ") or command.lower().startswith("category "):
        name = command.split(maxsplit=1)[1]
        try:
            await controller.select_category(name)
        except ValueError:
            safe_echo(f"[WARNING] Unknown category '{name}'. Choose from: {', '.join(Category.values())}")
        return True

    if command.isdigit():
        articles = controller.filtered_articles
        index = int(command) - 1
        if controller.render_mode != RenderMode.LIST or not 0 <= index < len(articles):
            safe_echo(f"[WARNING] No article #{command} in the current list")
            return True
        controller.select_article(articles[index])
        return True

    if command:
        safe_echo(f"[WARNING] Unknown command: {command}")
    return True
