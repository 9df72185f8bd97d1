from enum import Enum

import attrs


class UserRole(str, Enum):
    USER = 'user'
    ORGANIZER = 'organizer'
    ADMIN = 'admin'


@attrs.define(frozen=True)
class UserEntity:
    """Authenticated principal rebuilt from the JWT payload (accounts live elsewhere)"""

    id: int
    role: UserRole = UserRole.USER
    email: str = ''
    name: str = ''
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_organizer(self) -> bool:
        return self.role == UserRole.ORGANIZER
