from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class Role(str, Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"

    @property
    def authority(self) -> str:
        return f"ROLE_{self.value}"

    @classmethod
    def from_authorities(cls, authorities) -> "Role":
        return cls.ADMIN if cls.ADMIN.authority in set(authorities or ()) else cls.CLIENT


@dataclass(frozen=True)
class Principal:
    """Authenticated identity attached to a request; never persisted."""

    username: str
    role: Role
    authorities: Tuple[str, ...] = field(default_factory=tuple)

    # DRF and Django treat request.user as authenticated through these flags
    is_authenticated = True
    is_anonymous = False

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
