from dataclasses import dataclass
from typing import List, Optional

from .models import User


@dataclass
class UserDTO:
    id: int
    name: str
    email: str
    phone: Optional[str]
    birth_date: Optional[str]
    roles: List[str]


def user_to_dto(u: User) -> UserDTO:
    birth = getattr(u, "birth_date", None)
    return UserDTO(
        id=u.id,
        name=u.name or u.get_full_name() or u.username,
        email=u.email,
        phone=u.phone,
        birth_date=birth.isoformat() if birth is not None else None,
        roles=sorted(role.authority for role in u.roles.all()),
    )
