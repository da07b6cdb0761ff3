from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Team member; the ``user_id`` is the owner id of their entries."""

    user_id: int
    username: str
    display_name: str
    email: Optional[str]
    role: Role
    avatar_url: Optional[str] = None
