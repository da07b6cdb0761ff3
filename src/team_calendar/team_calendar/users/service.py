from __future__ import annotations

from typing import Dict, Sequence

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import User
from .repository import UserRepository


class UserService:
    """Read side of the team directory; accounts are managed elsewhere."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_team(self) -> Sequence[User]:
        return self._users.list_all()

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def directory(self) -> Dict[int, User]:
        return {u.user_id: u for u in self._users.list_all()}

    def list_admin_view(self, *, current_role: Role) -> Sequence[User]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self._users.list_all()
