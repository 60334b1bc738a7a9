"""Config command implementation."""
import asyncio
import logging
from typing import Optional

import typer

from ..lib.config_loader import ConfigLoader
from ..lib.console import safe_echo
from .context import global_config

logger = logging.getLogger(__name__)

# Create config subapp
config = typer.Typer(help="Configuration management")


@config.command()
def show(key: Optional[str] = typer.Argument(None, help="Specific configuration key")):
    """Show configuration."""
    if key:
        safe_echo(f"[CONFIG] Show config: {key}")
    else:
        safe_echo("[CONFIG] Show all configurations")

    try:
        config_data, sources = asyncio.run(_async_show_config())
    except Exception as e:
        safe_echo(f"[ERROR] Failed to show configuration: {e!s}")
        logger.error(f"Config show command failed: {e}")
        raise typer.Exit(1)

    if key:
        if key in config_data:
            safe_echo(f"{key} = {config_data[key]}")
        else:
            safe_echo(f"[WARNING] Configuration key '{key}' not found")
            safe_echo("Available keys:")
            for k in sorted(config_data.keys()):
                safe_echo(f"  - {k}")
            raise typer.Exit(1)
        return

    safe_echo("\nCurrent Configuration:")
    safe_echo("=" * 50)

    # Group configurations by category
    categories: dict[str, list[tuple[str, str]]] = {}
    for k, v in config_data.items():
        category = k.split(".")[0] if "." in k else "general"
        categories.setdefault(category, []).append((k, v))

    for category, items in sorted(categories.items()):
        safe_echo(f"\n[{category.upper()}]")
        for k, v in sorted(items):
            safe_echo(f"  {k} = {v}")

    safe_echo("=" * 50)
    safe_echo(f"Sources: {', '.join(sources)}")


async def _async_show_config() -> tuple[dict[str, str], list[str]]:
    """Async helper to load configuration with secrets masked."""
    config_loader = ConfigLoader()
    await config_loader.load_config(
        config_file=global_config.get("config_file"), use_defaults=True, use_environment=True
    )
    return config_loader.get_masked_config(), config_loader.get_config_sources()
