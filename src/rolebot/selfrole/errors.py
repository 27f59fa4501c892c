"""Exceptions raised by self-role menu operations."""


class SelfRoleError(Exception):
    """Base class for self-role errors.

    The message of a SelfRoleError is safe to show to the invoking user.
    """


class ValidationError(SelfRoleError):
    """Invalid input for a menu operation."""


class MenuNotFoundError(SelfRoleError):
    def __init__(self, message: str = "Self-role configuration not found") -> None:
        super().__init__(message)


class DuplicateRoleError(SelfRoleError):
    def __init__(
        self, message: str = "Role already exists in this self-role message"
    ) -> None:
        super().__init__(message)


class MenuFullError(SelfRoleError):
    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Cannot add more roles. Maximum of {limit} buttons per self-role message."
        )


class RoleNotInMenuError(SelfRoleError):
    def __init__(
        self, message: str = "Role not found in this self-role message"
    ) -> None:
        super().__init__(message)


class InvalidPositionError(SelfRoleError):
    def __init__(self, role_count: int) -> None:
        super().__init__(f"Position must be between 0 and {max(role_count - 1, 0)}.")


class PlatformError(SelfRoleError):
    """Discord rejected a role, message or channel operation."""


class RoleMissingError(PlatformError):
    """The role no longer exists on the platform."""


class StoreError(SelfRoleError):
    """A role menu document could not be read or written."""
