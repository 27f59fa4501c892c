"""Runtime settings for the role bot.

Settings loaded from environment variables and provided to components via dependency injection.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RoleBotSettings:
    """Runtime settings for the role bot."""

    # Bot configuration
    discord_token: str | None
    testing_guild: str | None

    # Storage
    mongodb_uri: str | None
    mongodb_database: str
    data_dir: Path
    state_dir: Path
    state_file: Path

    # Logging
    log_level: int

    @property
    def uses_mongodb(self) -> bool:
        """Whether role menus are stored in MongoDB rather than the JSON state file."""
        return bool(self.mongodb_uri)

    @staticmethod
    def from_environment() -> "RoleBotSettings":
        """Load settings from environment variables.

        Returns:
            RoleBotSettings instance with values from environment variables.
        """
        data_dir = Path(os.environ.get("ROLEBOT_DATA_DIR", "data"))
        state_dir = data_dir / "state"
        state_file = Path(
            os.environ.get("ROLEBOT_STATE_FILE", str(state_dir / "role_menus.json"))
        )

        log_level_name = os.environ.get("ROLEBOT_LOG_LEVEL", "INFO").strip().upper()
        log_level = logging.getLevelName(log_level_name)
        if not isinstance(log_level, int):
            log_level = logging.INFO

        return RoleBotSettings(
            discord_token=os.environ.get("ROLEBOT_DISCORD_TOKEN"),
            testing_guild=os.environ.get("ROLEBOT_TESTING_GUILD_ID"),
            mongodb_uri=os.environ.get("ROLEBOT_MONGODB_URI") or None,
            mongodb_database=os.environ.get("ROLEBOT_MONGODB_DATABASE", "rolebot"),
            data_dir=data_dir,
            state_dir=state_file.parent,
            state_file=state_file,
            log_level=log_level,
        )

    def validate(self, logger: logging.Logger) -> None:
        """Log warnings for missing optional configuration.

        Args:
            logger: Logger instance to use for warnings.
        """
        if self.discord_token is None:
            logger.warning("ROLEBOT_DISCORD_TOKEN is not set, the bot cannot connect")

        if not self.uses_mongodb:
            logger.warning(
                f"ROLEBOT_MONGODB_URI is not set, role menus will be stored in {self.state_file}"
            )
