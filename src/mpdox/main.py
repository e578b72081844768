"""
mpdox - Startup and shutdown around the interactive UI
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console

from mpdox.core.config import ConfigError, get_log_path, load_config
from mpdox.core.output import LogBuffer, setup_loguru
from mpdox.mpd import MpdClient, MpdConnectionError

# Fatal messages go to stderr; the terminal belongs to the UI otherwise
console = Console(stderr=True)


def interactive_mode(
    config_path: Optional[Path] = None, log_level: Optional[str] = None
) -> int:
    """Load config, set up logging, connect and run the UI.

    Returns:
        Exit code (0 for success, 1 for a fatal setup error)
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        return 1

    log_buffer = LogBuffer()
    log_file = get_log_path(config)
    setup_loguru(log_file, level=log_level or config.logging.level, buffer=log_buffer)

    client = MpdClient(config.address, password=config.password)
    try:
        client.connect()
    except MpdConnectionError as e:
        logger.error(f"Cannot connect to {config.address}: {e}")
        console.print(f"[bold red]Cannot connect to MPD at {config.address}:[/bold red] {e}")
        return 1

    from mpdox.ui.app import run_interactive_ui

    try:
        run_interactive_ui(client, config, log_buffer)
    finally:
        client.close()
        logger.info("Goodbye")

    return 0
