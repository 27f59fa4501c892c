"""Stand-ins for the parts of a discord.Interaction used by slash commands."""

from dataclasses import dataclass, field


@dataclass
class MockPermissions:
    send_messages: bool = True
    embed_links: bool = True


@dataclass
class MockUser:
    id: int
    name: str
    top_role: object = None

    def __str__(self) -> str:
        return self.name


@dataclass
class MockTextChannel:
    id: int
    permissions: MockPermissions = field(default_factory=MockPermissions)

    def permissions_for(self, member: object) -> MockPermissions:
        return self.permissions


@dataclass
class MockGuild:
    id: int
    me: MockUser = field(default_factory=lambda: MockUser(1, "rolebot"))


class MockResponse:
    """Records the initial response to an interaction."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.deferred = False

    def is_done(self) -> bool:
        return self.deferred or bool(self.messages)

    async def send_message(self, content: str, **kwargs) -> None:
        self.messages.append(content)

    async def defer(self, **kwargs) -> None:
        self.deferred = True


class MockFollowup:
    """Records follow-up messages sent after deferring."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def send(self, content: str, **kwargs) -> None:
        self.messages.append(content)


class MockInteraction:
    def __init__(self, guild: MockGuild, user: MockUser) -> None:
        self.guild = guild
        self.guild_id = guild.id
        self.user = user
        self.response = MockResponse()
        self.followup = MockFollowup()
