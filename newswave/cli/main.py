"""NewsWave CLI main entry point.

This module provides the main CLI application using Typer.
"""
import logging
from pathlib import Path
from typing import Optional

import typer

from .browse_command import browse
from .config_command import config
from .context import global_config
from .headlines_command import headlines
from .serve_command import serve

# Create main app
app = typer.Typer(
    name="newswave",
    help="NewsWave 新聞閱讀器：依分類瀏覽頭條、搜尋標題，並提供注入 API 金鑰的代理服務",
    no_args_is_help=True,
)

# Add subcommands
app.add_typer(config, name="config", help="配置管理")
app.command()(headlines)
app.command()(browse)
app.command()(serve)


# Global options
@app.callback()
def main(
    config_file: Optional[Path] = typer.Option(None, "--config-file", help="配置檔案路徑 (.json 或 .env)"),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="日誌級別 [DEBUG|INFO|WARNING|ERROR]"
    ),
):
    """NewsWave - 頭條新聞閱讀器."""
    # Setup logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Store global options
    global_config["config_file"] = config_file
    global_config["log_level"] = log_level


if __name__ == "__main__":
    app()
