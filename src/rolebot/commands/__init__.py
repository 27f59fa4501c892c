"""Discord bot commands package."""

from rolebot.bot import RoleBot


def register_all_commands(client: RoleBot) -> None:
    """Register all commands for the bot."""
    from rolebot.commands import help, selfrole, selfrole_advanced, setup

    selfrole.register_commands(client)
    selfrole_advanced.register_commands(client)
    setup.register_commands(client)
    help.register_commands(client)
