"""Decorators for Discord bot commands."""

from functools import wraps

from discord import Interaction, app_commands


def guild_only():
    """Decorator that ensures a command can only be used in a guild/server.

    This prevents the command from being used in DMs or other non-guild contexts.

    Note: After using this decorator, you should add `assert interaction.guild_id is not None`
    in the function body to help the type checker understand that guild_id is guaranteed to be non-None.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(interaction: Interaction, *args, **kwargs):
            if interaction.guild_id is None:
                await interaction.response.send_message(
                    "This command can only be used in a server.", ephemeral=True
                )
                return
            return await func(interaction, *args, **kwargs)

        return wrapper

    return decorator


def has_manage_guild():
    """Decorator that checks the invoking member may manage the server.

    Unlike default_permissions, this is enforced by the bot itself and raises
    a CheckFailure that the error handler reports to the user.
    """

    async def predicate(interaction: Interaction) -> bool:
        permissions = interaction.permissions
        return permissions.manage_guild or permissions.administrator

    return app_commands.check(predicate)


def has_administrator():
    """Decorator that checks the invoking member is a server administrator."""

    async def predicate(interaction: Interaction) -> bool:
        return interaction.permissions.administrator

    return app_commands.check(predicate)
