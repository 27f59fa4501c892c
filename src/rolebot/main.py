import logging
import sys

import colorlog
from discord import Intents

from rolebot.bot import RoleBot
from rolebot.commands import register_all_commands
from rolebot.config.settings import RoleBotSettings
from rolebot.config.validation import validate_and_setup_directories
from rolebot.events import register_events

logger = logging.getLogger(__name__)


def setup_logging(log_level: int) -> None:
    formatter = colorlog.ColoredFormatter(
        "%(cyan)s%(asctime)s%(reset)s %(log_color)s%(levelname)-8s%(reset)s %(light_purple)s%(name)s:%(reset)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "purple",
            "INFO": "blue",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.addHandler(handler)


def run_bot() -> None:
    """Entry point for the rolebot script."""
    # Load settings once at startup
    settings = RoleBotSettings.from_environment()
    setup_logging(settings.log_level)
    settings.validate(logger)

    logger.info("Starting role bot")

    # Validate directories
    validation_errors = validate_and_setup_directories(settings)
    if validation_errors:
        for error in validation_errors:
            logger.error(error)
        logger.critical("Startup validation failed, exiting")
        sys.exit(1)

    if not settings.discord_token:
        logger.error(
            "Please pass in a Discord bot token via the ROLEBOT_DISCORD_TOKEN environment variable."
        )
        return

    # Members are needed to resolve role holders in bulk operations
    intents = Intents.default()
    intents.members = True

    if settings.testing_guild:
        logger.info(f"Using testing guild {settings.testing_guild}")

    client = RoleBot(settings=settings, intents=intents, command_prefix="!")
    register_events(client)
    register_all_commands(client)

    # Disable built-in log handler as we set our own
    client.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    run_bot()
