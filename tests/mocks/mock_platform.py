"""Mock implementation of RolePlatform protocol for testing."""

from rolebot.selfrole.errors import PlatformError, RoleMissingError


class MockRolePlatform:
    """Test double for RolePlatform protocol.

    Tracks guild roles and member roles in memory. Grants and revokes are
    recorded as events: ('grant_role', user_id, role_id).
    """

    def __init__(self, events: list[tuple] | None = None) -> None:
        self.events = events if events is not None else []
        self.guild_roles: dict[str, set[str]] = {}
        self.member_roles: dict[tuple[str, str], set[str]] = {}
        self.fail_with: PlatformError | None = None
        self.fail_for_users: set[str] = set()

    def add_guild_roles(self, guild_id: str, *role_ids: str) -> None:
        self.guild_roles.setdefault(guild_id, set()).update(role_ids)

    def add_member(self, guild_id: str, user_id: str, *role_ids: str) -> None:
        self.member_roles[(guild_id, user_id)] = set(role_ids)

    def _check(self, guild_id: str, user_id: str, role_id: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if user_id in self.fail_for_users:
            raise PlatformError("Missing permissions")
        if role_id not in self.guild_roles.get(guild_id, set()):
            raise RoleMissingError(f"Role {role_id} no longer exists")

    async def grant_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        self.events.append(("grant_role", user_id, role_id))
        self._check(guild_id, user_id, role_id)
        self.member_roles.setdefault((guild_id, user_id), set()).add(role_id)

    async def revoke_role(
        self, guild_id: str, user_id: str, role_id: str, reason: str
    ) -> None:
        self.events.append(("revoke_role", user_id, role_id))
        self._check(guild_id, user_id, role_id)
        self.member_roles.get((guild_id, user_id), set()).discard(role_id)

    async def role_exists(self, guild_id: str, role_id: str) -> bool:
        return role_id in self.guild_roles.get(guild_id, set())

    async def existing_role_ids(self, guild_id: str) -> set[str] | None:
        roles = self.guild_roles.get(guild_id)
        return set(roles) if roles is not None else None

    async def member_role_ids(self, guild_id: str, user_id: str) -> set[str] | None:
        roles = self.member_roles.get((guild_id, user_id))
        return set(roles) if roles is not None else None
