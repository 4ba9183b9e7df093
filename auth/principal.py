from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Permission tier carried in the token's ``role`` claim."""

    ADMIN = "Admin"
    USER = "User"


@dataclass(frozen=True)
class Principal:
    """A verified caller: who they are and which tier they belong to."""

    identity: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
