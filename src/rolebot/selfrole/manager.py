"""RoleMenuManager for creating, editing and inspecting role menus."""

import json
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from rolebot.config import constants
from rolebot.selfrole import menu
from rolebot.selfrole.coordinator import utcnow
from rolebot.selfrole.errors import (
    MenuNotFoundError,
    PlatformError,
    RoleNotInMenuError,
    StoreError,
    ValidationError,
)
from rolebot.selfrole.models import (
    Attribution,
    BulkAssignResult,
    GuildRoleStats,
    MenuSettings,
    RoleAssignmentStat,
    RoleEntry,
    RoleMenuConfig,
    json_default,
)
from rolebot.selfrole.protocols import MenuRenderer, RoleMenuStore, RolePlatform
from rolebot.selfrole.templates import MenuTemplate, get_template

logger = logging.getLogger(__name__)


class RoleMenuManager:
    """Administrative operations on the role menus of a guild.

    Each operation loads the menu fresh from the store, applies one change
    and writes the whole document back.
    """

    def __init__(
        self,
        store: RoleMenuStore,
        platform: RolePlatform,
        renderer: MenuRenderer,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.platform = platform
        self.renderer = renderer
        self._clock = clock

    async def get_menu(self, guild_id: str, message_id: str) -> RoleMenuConfig:
        """Load a menu belonging to guild_id.

        Raises:
            MenuNotFoundError: If there is no such menu in this guild.
        """
        config = await self.store.find(message_id)
        if config is None or config.guild_id != guild_id:
            raise MenuNotFoundError(
                "Self-role message not found. Make sure the message ID is correct."
            )
        return config

    async def _persist(
        self, config: RoleMenuConfig, actor: Attribution, redraw: bool = True
    ) -> None:
        menu.touch(config, actor.user_id, actor.username, self._clock())
        await self.store.save(config)
        if redraw:
            await self._refresh(config)

    async def _refresh(self, config: RoleMenuConfig) -> None:
        try:
            await self.renderer.refresh(config)
        except PlatformError as e:
            logger.error(f"Error updating self-role message {config.message_id}: {e}")

    async def create_menu(
        self,
        guild_id: str,
        channel_id: str,
        title: str,
        description: str,
        actor: Attribution,
        color: str | None = None,
        settings: MenuSettings | None = None,
    ) -> RoleMenuConfig:
        """Post a new, empty menu and store it.

        Either both the message and the document exist afterwards, or neither.

        Raises:
            ValidationError: If the title, description or colour is invalid.
            PlatformError: If the message could not be posted.
            StoreError: If the document could not be written.
        """
        now = self._clock()
        config = menu.new_menu(
            guild_id=guild_id,
            channel_id=channel_id,
            message_id="",
            title=title,
            description=description,
            created_by=Attribution(actor.user_id, actor.username, now),
            color=color or constants.DEFAULT_MENU_COLOR,
            settings=settings,
        )

        config.message_id = await self.renderer.post(config)

        try:
            await self.store.save(config)
        except StoreError:
            logger.error(
                f"Saving new menu {config.message_id} failed, removing posted message"
            )
            try:
                await self.renderer.delete(config)
            except PlatformError as e:
                logger.warning(f"Could not delete self-role message: {e}")
            raise

        logger.info(
            f"Created self-role menu {config.message_id} in channel {channel_id} "
            f"(guild {guild_id})"
        )
        return config

    async def create_from_template(
        self,
        guild_id: str,
        channel_id: str,
        template_key: str,
        actor: Attribution,
        title: str | None = None,
        description: str | None = None,
    ) -> tuple[RoleMenuConfig, MenuTemplate]:
        """Create a menu from one of the setup wizard templates."""
        template = get_template(template_key, title, description)
        if template is None:
            raise ValidationError(
                "Custom template requires both title and description."
            )

        config = await self.create_menu(
            guild_id,
            channel_id,
            template.title,
            template.description,
            actor,
            color=template.color,
        )
        return config, template

    async def add_role(
        self, guild_id: str, message_id: str, entry: RoleEntry, actor: Attribution
    ) -> RoleMenuConfig:
        config = await self.get_menu(guild_id, message_id)
        menu.add_role(config, entry)
        await self._persist(config, actor)
        return config

    async def remove_role(
        self, guild_id: str, message_id: str, role_id: str, actor: Attribution
    ) -> RoleEntry:
        config = await self.get_menu(guild_id, message_id)
        entry = menu.remove_role(config, role_id)
        await self._persist(config, actor)
        return entry

    async def reorder_role(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        new_position: int,
        actor: Attribution,
    ) -> None:
        config = await self.get_menu(guild_id, message_id)
        menu.reorder_role(config, role_id, new_position)
        await self._persist(config, actor)

    async def edit_menu(
        self,
        guild_id: str,
        message_id: str,
        actor: Attribution,
        title: str | None = None,
        description: str | None = None,
        color: str | None = None,
    ) -> list[str]:
        config = await self.get_menu(guild_id, message_id)
        changes = menu.update_appearance(config, title, description, color)
        if not changes:
            raise ValidationError("No changes specified.")
        await self._persist(config, actor)
        return changes

    async def update_settings(
        self,
        guild_id: str,
        message_id: str,
        actor: Attribution,
        max_roles_per_user: int | None = None,
        allow_role_removal: bool | None = None,
        ephemeral_response: bool | None = None,
        log_channel_id: str | None = None,
    ) -> list[str]:
        config = await self.get_menu(guild_id, message_id)
        changes = menu.update_settings(
            config,
            max_roles_per_user=max_roles_per_user,
            allow_role_removal=allow_role_removal,
            ephemeral_response=ephemeral_response,
            log_channel_id=log_channel_id,
        )
        if not changes:
            raise ValidationError("No settings specified.")
        await self._persist(config, actor)
        return changes

    async def set_role_limits(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        actor: Attribution,
        max_assignments: int | None = None,
        required_role: str | None = None,
    ) -> list[str]:
        config = await self.get_menu(guild_id, message_id)
        changes = menu.update_role_limits(
            config, role_id, max_assignments=max_assignments, required_role=required_role
        )
        if not changes:
            raise ValidationError("No changes specified.")
        await self._persist(config, actor)
        return changes

    async def add_conflict(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        conflicting_role: str,
        actor: Attribution,
    ) -> None:
        config = await self.get_menu(guild_id, message_id)
        menu.add_conflict(config, role_id, conflicting_role)
        # Conflicts are not shown on the menu message
        await self._persist(config, actor, redraw=False)

    async def remove_conflict(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        conflicting_role: str,
        actor: Attribution,
    ) -> None:
        config = await self.get_menu(guild_id, message_id)
        menu.remove_conflict(config, role_id, conflicting_role)
        await self._persist(config, actor, redraw=False)

    async def reset_stats(
        self, guild_id: str, message_id: str, actor: Attribution
    ) -> None:
        config = await self.get_menu(guild_id, message_id)
        menu.reset_statistics(config)
        await self._persist(config, actor)

    async def delete_menu(self, guild_id: str, message_id: str) -> None:
        """Delete a menu.

        Removing the document is what counts; failing to delete the posted
        message is only logged.
        """
        config = await self.get_menu(guild_id, message_id)

        try:
            await self.renderer.delete(config)
        except PlatformError as e:
            # Message might already be deleted
            logger.warning(f"Could not delete self-role message {message_id}: {e}")

        await self.store.delete(message_id)
        logger.info(f"Deleted self-role menu {message_id} (guild {guild_id})")

    async def list_menus(self, guild_id: str) -> list[RoleMenuConfig]:
        return await self.store.list_by_guild(guild_id)

    async def cleanup_stale_roles(self, guild_id: str) -> int:
        """Remove entries for roles deleted from the guild from every menu.

        Returns:
            Total number of entries removed.
        """
        existing = await self.platform.existing_role_ids(guild_id)
        if existing is None:
            return 0

        cleaned_count = 0
        for config in await self.store.list_by_guild(guild_id):
            removed = menu.remove_stale_roles(config, existing)
            if removed:
                cleaned_count += removed
                await self.store.save(config)
                await self._refresh(config)

        logger.info(f"Removed {cleaned_count} stale role(s) in guild {guild_id}")
        return cleaned_count

    async def guild_stats(
        self, guild_id: str, message_id: str | None = None
    ) -> GuildRoleStats | None:
        """Aggregate statistics for one menu, or for every menu of the guild.

        Returns:
            The statistics, or None if there are no matching menus.
        """
        if message_id:
            config = await self.store.find(message_id)
            menus = [config] if config and config.guild_id == guild_id else []
        else:
            menus = await self.store.list_by_guild(guild_id)

        if not menus:
            return None

        unique_users: set[str] = set()
        role_totals: dict[str, RoleAssignmentStat] = {}
        for config in menus:
            unique_users.update(u.user_id for u in config.statistics.unique_users)
            for stat in config.statistics.role_assignments:
                total = role_totals.setdefault(
                    stat.role_id, RoleAssignmentStat(role_id=stat.role_id)
                )
                total.assigned_count += stat.assigned_count
                total.removed_count += stat.removed_count

        return GuildRoleStats(
            total_menus=len(menus),
            total_roles=sum(len(c.roles) for c in menus),
            total_interactions=sum(c.statistics.total_interactions for c in menus),
            unique_users=len(unique_users),
            role_totals=role_totals,
        )

    async def export_data(
        self, guild_id: str, guild_name: str, message_id: str | None = None
    ) -> bytes:
        """Serialise one or all menus of a guild as a JSON export."""
        if message_id:
            data: dict | list = (await self.get_menu(guild_id, message_id)).to_document()
        else:
            data = [c.to_document() for c in await self.store.list_by_guild(guild_id)]

        export = {
            "exported": self._clock().isoformat(),
            "guildId": guild_id,
            "guildName": guild_name,
            "data": data,
        }
        return json.dumps(export, indent=2, default=json_default).encode("utf-8")

    async def bulk_assign(
        self,
        guild_id: str,
        message_id: str,
        role_id: str,
        user_ids: Iterable[str],
    ) -> BulkAssignResult:
        """Grant a menu role to several members at once.

        Eligibility rules are not applied; this is an administrator override.
        Every successful grant is counted in the menu statistics.
        """
        config = await self.get_menu(guild_id, message_id)
        if config.find_role(role_id) is None:
            raise RoleNotInMenuError()

        result = BulkAssignResult()
        for user_id in user_ids:
            try:
                member_roles = await self.platform.member_role_ids(guild_id, user_id)
                if member_roles is None:
                    result.failed += 1
                    result.errors.append(f"User {user_id} not found")
                    continue
                if role_id in member_roles:
                    result.failed += 1
                    result.errors.append(f"<@{user_id}> already has the role")
                    continue

                await self.platform.grant_role(
                    guild_id, user_id, role_id, "Bulk self-role assignment"
                )
            except PlatformError as e:
                result.failed += 1
                result.errors.append(f"{user_id}: {e}")
                continue

            result.success += 1
            menu.record_assignment(config, role_id, user_id, self._clock())

        if result.success:
            await self.store.save(config)
            await self._refresh(config)

        logger.info(
            f"Bulk assigned role {role_id} in guild {guild_id}: "
            f"{result.success} succeeded, {result.failed} failed"
        )
        return result
