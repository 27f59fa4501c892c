"""Shared test fixtures and utilities."""

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from rolebot.config.settings import RoleBotSettings
from rolebot.selfrole.coordinator import AssignmentCoordinator
from rolebot.selfrole.manager import RoleMenuManager
from rolebot.selfrole.models import (
    Attribution,
    MenuSettings,
    RoleEntry,
    RoleMenuConfig,
)
from tests.mocks.mock_output import MockActionLog, MockMenuRenderer
from tests.mocks.mock_platform import MockRolePlatform
from tests.mocks.mock_store import MockRoleMenuStore

GUILD_ID = "100000000000000001"
CHANNEL_ID = "200000000000000002"
MESSAGE_ID = "300000000000000003"
ADMIN = Attribution(user_id="400000000000000004", username="admin")

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def settings(tmp_path: Path) -> RoleBotSettings:
    """RoleBotSettings using the JSON store under a temporary directory."""
    state_dir = tmp_path / "state"
    return RoleBotSettings(
        discord_token="fake_token",
        testing_guild=None,
        mongodb_uri=None,
        mongodb_database="rolebot",
        data_dir=tmp_path,
        state_dir=state_dir,
        state_file=state_dir / "role_menus.json",
        log_level=logging.INFO,  # Default log level for tests
    )


@pytest.fixture
def events() -> list[tuple]:
    """Event log shared by all mocks, to check call ordering."""
    return []


@pytest.fixture
def store(events) -> MockRoleMenuStore:
    """Fresh MockRoleMenuStore instance."""
    return MockRoleMenuStore(events)


@pytest.fixture
def platform(events) -> MockRolePlatform:
    """MockRolePlatform with the roles used by make_menu() created in the guild."""
    platform = MockRolePlatform(events)
    platform.add_guild_roles(GUILD_ID, "gamer", "artist", "teamA", "teamB", "member")
    return platform


@pytest.fixture
def renderer(events) -> MockMenuRenderer:
    """Fresh MockMenuRenderer instance."""
    return MockMenuRenderer(events)


@pytest.fixture
def action_log(events) -> MockActionLog:
    """Fresh MockActionLog instance."""
    return MockActionLog(events)


@pytest.fixture
def coordinator(store, platform, renderer, action_log) -> AssignmentCoordinator:
    return AssignmentCoordinator(
        store, platform, renderer, action_log, clock=fixed_clock
    )


@pytest.fixture
def manager(store, platform, renderer) -> RoleMenuManager:
    return RoleMenuManager(store, platform, renderer, clock=fixed_clock)


def make_entry(role_id: str, position: int = 0, **kwargs) -> RoleEntry:
    """Helper to create test RoleEntry instances."""
    return RoleEntry(
        role_id=role_id,
        role_name=kwargs.pop("role_name", role_id.title()),
        label=kwargs.pop("label", role_id.title()),
        position=position,
        **kwargs,
    )


def make_menu(
    *entries: RoleEntry,
    message_id: str = MESSAGE_ID,
    settings: MenuSettings | None = None,
) -> RoleMenuConfig:
    """Helper to create a test RoleMenuConfig in GUILD_ID."""
    return RoleMenuConfig(
        guild_id=GUILD_ID,
        message_id=message_id,
        channel_id=CHANNEL_ID,
        title="Pick your roles",
        description="Click a button below",
        roles=list(entries),
        settings=settings or MenuSettings(),
        created_by=Attribution(ADMIN.user_id, ADMIN.username, FIXED_NOW),
        created_at=FIXED_NOW,
    )
