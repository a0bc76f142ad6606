from __future__ import annotations

from apps.api.exceptions import ResourceNotFound
from apps.auth.dtos import Principal, Role
from apps.common import get_logger

from .dtos import UserDTO, user_to_dto
from .protocols import UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")


class UserService:
    def __init__(self, users: UserRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="UserService")

    def _require(self, username: str):
        user = self.users.get_by_username(username)
        if user is None:
            self.logger.info("User not found", username=username)
            raise ResourceNotFound(details={"username": username})
        return user

    def load_principal(self, username: str) -> Principal:
        """Resolve the identity and authorities embedded in issued tokens."""
        user = self._require(username)
        authorities = {role.authority for role in user.roles.all()}
        if getattr(user, "is_superuser", False):
            authorities.add(Role.ADMIN.authority)
        if not authorities:
            authorities.add(Role.CLIENT.authority)
        principal = Principal(
            username=user.username,
            role=Role.from_authorities(authorities),
            authorities=tuple(sorted(authorities)),
        )
        self.logger.debug(
            "Loaded principal", username=username, role=principal.role.value
        )
        return principal

    def get_me(self, username: str) -> UserDTO:
        self.logger.debug("Fetching current user", username=username)
        return user_to_dto(self._require(username))
