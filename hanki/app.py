"""
hanki: Korean vocabulary assistant for Anki
-------------------------------------------

Entry point: checks AnkiConnect, then runs the interactive shell.
"""

import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .config import Config
from .exceptions import HankiError
from .services import AnkiConnectClient, ContentGenerator, NoteStore
from .ui import RichPrompter
from .ui.shell import InteractiveShell
from .utils import setup_logger

logger = logging.getLogger(__name__)


async def main(config: Optional[Config] = None, console: Optional[Console] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit code
    """
    console = console or Console()
    try:
        config = config or Config.from_env()
        setup_logger(config.log_level, config.log_file)
        config.require_generation()

        async with AnkiConnectClient(config.anki) as client, ContentGenerator(config) as generator:
            console.print("Checking AnkiConnect connection...")
            version = await client.check_availability()
            console.print(f"Successfully connected to AnkiConnect (version {version})!\n")

            shell = InteractiveShell(NoteStore(client), generator, RichPrompter(console), console)
            await shell.run()
    except HankiError as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"\n[red]Error:[/red] {escape(str(e))}")
        return 1
    return 0


def run() -> None:
    """Console script entry."""
    try:
        sys.exit(asyncio.run(main()))
    except (KeyboardInterrupt, EOFError):
        print("\n[!] Aborted by user.")
        sys.exit(1)
