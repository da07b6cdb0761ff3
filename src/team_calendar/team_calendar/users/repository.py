from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """Ordered by display_name."""

        raise NotImplementedError
