"""Entry point for the bot application."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from ..core.application import ApplicationManager
from ..core.exceptions import StartupError, TicketKeeperError

logger = logging.getLogger(__name__)


async def run(mode: str, config_path: str) -> None:
    app_manager = ApplicationManager()
    await app_manager.initialize(mode, config_path)
    await app_manager.run()


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="ticketkeeper Discord bot")
    parser.add_argument("mode", nargs="?", choices=["dev", "prod"], default="prod",
                        help="Mode to run the application in")
    parser.add_argument("--config", default="config.yml", help="Path to the YAML configuration file")
    args = parser.parse_args(argv)

    load_dotenv(dotenv_path=".env")

    try:
        asyncio.run(run(args.mode, args.config))
    except KeyboardInterrupt:
        print("\nBot stopped by user")
    except StartupError as e:
        logger.critical(f"Startup failed: {e}")
        sys.exit(1)
    except TicketKeeperError as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
