"""RoleBot Discord bot class and initialization."""

from discord.ext import commands

from rolebot.config.settings import RoleBotSettings
from rolebot.selfrole import AssignmentCoordinator, RoleMenuManager, create_store
from rolebot.selfrole.discord_impl import (
    DiscordActionLog,
    DiscordMenuRenderer,
    DiscordRolePlatform,
)
from rolebot.selfrole.stores import MongoRoleMenuStore


class RoleBot(commands.Bot):
    """Custom role bot class."""

    def __init__(self, settings: RoleBotSettings, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.settings = settings
        self.store = create_store(settings)

        # Discord-backed implementations only need the client object
        self.platform = DiscordRolePlatform(self)
        self.renderer = DiscordMenuRenderer(self)
        self.action_log = DiscordActionLog(self)

        self.manager = RoleMenuManager(self.store, self.platform, self.renderer)
        self.coordinator = AssignmentCoordinator(
            self.store, self.platform, self.renderer, self.action_log
        )

    async def close(self) -> None:
        await super().close()
        if isinstance(self.store, MongoRoleMenuStore):
            await self.store.close()
