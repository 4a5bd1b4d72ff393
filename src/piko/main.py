"""Piko entry point."""

import asyncio
import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=os.getenv("PIKO_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) > 1 and sys.argv[1] == "bot":
        from .telegram import TelegramBot

        try:
            bot = TelegramBot()
        except ValueError as e:
            print(f"❌ Error: {e}")
            sys.exit(1)
        bot.run()
        return

    asyncio.run(run_cli())


if __name__ == "__main__":
    main()
