"""Protocol definitions for dependency injection in the self-role system."""

from typing import Literal, Protocol

from rolebot.selfrole.models import RoleMenuConfig

RoleAction = Literal["assigned", "removed"]


class RoleMenuStore(Protocol):
    """Protocol for role menu persistence.

    Implementations read and write whole documents. There is no version
    check, so concurrent writers follow last-writer-wins.
    """

    async def find(self, message_id: str) -> RoleMenuConfig | None:
        """Load the menu posted as message_id.

        Returns:
            A fresh copy of the stored menu, or None if there is none.

        Raises:
            StoreError: If the store could not be read.
        """
        ...

    async def save(self, config: RoleMenuConfig) -> None:
        """Insert or replace the whole menu document.

        Raises:
            StoreError: If the document could not be written.
        """
        ...

    async def delete(self, message_id: str) -> bool:
        """Remove a menu document.

        Returns:
            True if a document was removed, False if none existed.
        """
        ...

    async def list_by_guild(self, guild_id: str) -> list[RoleMenuConfig]:
        """List every menu of a guild, most recently created first."""
        ...


class RolePlatform(Protocol):
    """Protocol for role operations on the chat platform."""

    async def grant_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        """Give a member a role.

        Raises:
            RoleMissingError: If the role no longer exists.
            PlatformError: If the platform rejected the change.
        """
        ...

    async def revoke_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        """Take a role away from a member.

        Raises:
            RoleMissingError: If the role no longer exists.
            PlatformError: If the platform rejected the change.
        """
        ...

    async def role_exists(self, guild_id: str, role_id: str) -> bool:
        """Check whether a role still exists in the guild."""
        ...

    async def existing_role_ids(self, guild_id: str) -> set[str] | None:
        """Get the IDs of every role in the guild.

        Returns:
            The role IDs, or None if the guild is unavailable.
        """
        ...

    async def member_role_ids(self, guild_id: str, user_id: str) -> set[str] | None:
        """Get the IDs of every role a member holds.

        Returns:
            The role IDs, or None if the member is not in the guild.
        """
        ...


class MenuRenderer(Protocol):
    """Protocol for displaying role menus.

    Implementations own the embed and button layout of a menu message.
    """

    async def post(self, config: RoleMenuConfig) -> str:
        """Post a new menu message in config.channel_id.

        Returns:
            The ID of the posted message.

        Raises:
            PlatformError: If the message could not be posted.
        """
        ...

    async def refresh(self, config: RoleMenuConfig) -> None:
        """Re-render an already posted menu message.

        Raises:
            PlatformError: If the message could not be edited.
        """
        ...

    async def delete(self, config: RoleMenuConfig) -> bool:
        """Delete a posted menu message, if it still exists.

        Returns:
            True if the message was deleted.
        """
        ...


class ActionLog(Protocol):
    """Protocol for reporting role changes to a guild's log channel."""

    async def role_changed(
        self,
        config: RoleMenuConfig,
        user_id: str,
        role_id: str,
        action: RoleAction,
    ) -> None:
        """Report that a user gained or lost a role through a menu.

        Does nothing when the menu has no log channel configured.
        """
        ...
