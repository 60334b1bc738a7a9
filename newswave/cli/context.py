"""Global CLI options shared by all commands."""
from pathlib import Path
from typing import Any, Optional

from ..lib.config_loader import ConfigLoader

# Global context storage, filled by the root callback
global_config: dict[str, Any] = {
    "config_file": None,
    "log_level": "INFO",
}


async def load_cli_config(config_file: Optional[Path] = None) -> dict[str, str]:
    """Load configuration honouring the global ``--config-file`` option."""
    config_loader = ConfigLoader()
    return await config_loader.load_config(
        config_file=config_file or global_config.get("config_file"),
        use_defaults=True,
        use_environment=True,
    )
