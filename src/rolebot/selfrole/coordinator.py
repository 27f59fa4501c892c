"""AssignmentCoordinator for handling role menu button presses."""

import logging
from collections.abc import Callable, Collection
from datetime import datetime, timezone

from rolebot.selfrole import menu
from rolebot.selfrole.eligibility import can_assign, can_remove
from rolebot.selfrole.errors import PlatformError, RoleMissingError, StoreError
from rolebot.selfrole.models import OutcomeKind, RoleMenuConfig, ToggleOutcome
from rolebot.selfrole.protocols import (
    ActionLog,
    MenuRenderer,
    RoleAction,
    RoleMenuStore,
    RolePlatform,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentCoordinator:
    """Carries out a single role toggle from start to finish.

    A toggle makes at most one platform call, one document write and one
    re-render, always in that order. A rejected platform call returns before
    any statistic is touched. A failed write after a successful platform call
    is reported but the role change is not undone.

    No locking is done here: two toggles on the same menu that overlap will
    each write back their own copy, and the later write wins.
    """

    def __init__(
        self,
        store: RoleMenuStore,
        platform: RolePlatform,
        renderer: MenuRenderer,
        action_log: ActionLog | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.platform = platform
        self.renderer = renderer
        self.action_log = action_log
        self._clock = clock

    async def handle_toggle(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        user_id: str,
        current_role_ids: Collection[str],
    ) -> ToggleOutcome:
        """Handle a button press on a role menu.

        Args:
            guild_id: Guild the menu was posted in.
            message_id: ID of the menu message.
            role_id: Role encoded in the pressed button.
            user_id: The user who pressed the button.
            current_role_ids: IDs of every role the user currently holds.

        Returns:
            The outcome of the toggle.
        """
        config = await self.store.find(message_id)
        if config is None or config.guild_id != guild_id:
            return ToggleOutcome(OutcomeKind.MENU_NOT_FOUND)

        if not await self.platform.role_exists(guild_id, role_id):
            logger.warning(
                f"Role {role_id} on menu {message_id} no longer exists in guild {guild_id}"
            )
            return ToggleOutcome(OutcomeKind.ROLE_MISSING_ON_PLATFORM)

        return await self.toggle_role(config, role_id, user_id, current_role_ids)

    async def toggle_role(
        self,
        config: RoleMenuConfig,
        role_id: str,
        user_id: str,
        current_role_ids: Collection[str],
    ) -> ToggleOutcome:
        """Give the user the role if they lack it, otherwise take it away.

        config is mutated in place and persisted on success.
        """
        if role_id in current_role_ids:
            outcome = await self._remove(config, role_id, user_id)
        else:
            outcome = await self._assign(config, role_id, user_id, current_role_ids)

        logger.info(
            f"Toggle of role {role_id} by user {user_id} on menu {config.message_id}: "
            f"{outcome.kind.name}{f' ({outcome.reason})' if outcome.reason else ''}"
        )
        return outcome

    async def _assign(
        self,
        config: RoleMenuConfig,
        role_id: str,
        user_id: str,
        current_role_ids: Collection[str],
    ) -> ToggleOutcome:
        eligibility = can_assign(config, role_id, user_id, current_role_ids)
        if not eligibility.allowed:
            return ToggleOutcome(OutcomeKind.DENIED_ASSIGN, eligibility.reason)

        try:
            await self.platform.grant_role(
                config.guild_id, user_id, role_id, "Self-role assignment"
            )
        except RoleMissingError:
            return ToggleOutcome(OutcomeKind.ROLE_MISSING_ON_PLATFORM)
        except PlatformError as e:
            logger.error(f"Error assigning self-role {role_id} to {user_id}: {e}")
            return ToggleOutcome(OutcomeKind.PLATFORM_FAILED, str(e))

        menu.record_assignment(config, role_id, user_id, self._clock())
        return await self._commit(config, role_id, user_id, "assigned")

    async def _remove(
        self, config: RoleMenuConfig, role_id: str, user_id: str
    ) -> ToggleOutcome:
        eligibility = can_remove(config)
        if not eligibility.allowed:
            return ToggleOutcome(OutcomeKind.DENIED_REMOVE, eligibility.reason)
        if config.find_role(role_id) is None:
            return ToggleOutcome(OutcomeKind.DENIED_REMOVE, "Role not found")

        try:
            await self.platform.revoke_role(
                config.guild_id, user_id, role_id, "Self-role removal"
            )
        except RoleMissingError:
            return ToggleOutcome(OutcomeKind.ROLE_MISSING_ON_PLATFORM)
        except PlatformError as e:
            logger.error(f"Error removing self-role {role_id} from {user_id}: {e}")
            return ToggleOutcome(OutcomeKind.PLATFORM_FAILED, str(e))

        menu.record_removal(config, role_id, user_id, self._clock())
        return await self._commit(config, role_id, user_id, "removed")

    async def _commit(
        self, config: RoleMenuConfig, role_id: str, user_id: str, action: RoleAction
    ) -> ToggleOutcome:
        """Persist a toggle that already happened on the platform, then redraw."""
        try:
            await self.store.save(config)
        except StoreError as e:
            # The platform change is not rolled back
            logger.error(
                f"Role {role_id} {action} for {user_id} but saving menu "
                f"{config.message_id} failed: {e}"
            )
            return ToggleOutcome(OutcomeKind.PERSISTENCE_FAILED)

        try:
            await self.renderer.refresh(config)
        except PlatformError as e:
            logger.error(f"Error updating self-role message {config.message_id}: {e}")

        if self.action_log is not None:
            await self.action_log.role_changed(config, user_id, role_id, action)

        kind = OutcomeKind.ASSIGNED if action == "assigned" else OutcomeKind.REMOVED
        return ToggleOutcome(kind, ephemeral=config.settings.ephemeral_response)
