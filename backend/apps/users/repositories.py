from typing import Optional

from apps.common.repository import GenericRepository

from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def queryset(self):
        return self.model.objects.prefetch_related("roles")

    def get_by_username(self, username: str) -> Optional[User]:
        return self.queryset().filter(username=username).first()
