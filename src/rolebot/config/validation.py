"""Startup validation for the role bot."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolebot.config.settings import RoleBotSettings

logger = logging.getLogger(__name__)


def validate_and_setup_directories(settings: "RoleBotSettings") -> list[str]:
    """Validate directories exist and are writable, create if needed.

    Args:
        settings: RoleBotSettings instance containing directory paths.

    Returns:
        List of error messages (empty if all OK).
    """
    errors = []

    if settings.uses_mongodb:
        # Nothing is written locally when menus live in MongoDB
        return errors

    dir_path = settings.state_dir
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
        # Test writability
        test_file = dir_path / ".write_test"
        test_file.touch()
        test_file.unlink()
    except (OSError, PermissionError) as e:
        errors.append(f"Cannot write to state directory ({dir_path}): {e}")

    if settings.state_file.exists() and not settings.state_file.is_file():
        errors.append(f"State file path is not a file: {settings.state_file}")

    return errors
