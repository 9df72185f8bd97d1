from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


AUTH_COOKIE_NAME = 'fastapiusersauth'


class RoleAuthStrategy:
    @staticmethod
    def can_create_event(user: UserEntity) -> bool:
        return user.role in (UserRole.ORGANIZER, UserRole.ADMIN)

    @staticmethod
    def can_refund(user: UserEntity) -> bool:
        return user.role == UserRole.ADMIN


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
) -> UserEntity:
    """Rebuild the acting user from the Bearer header or the session cookie (no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(
        JwtAuth.extract_token(authorization=authorization, cookie_token=token)
    )


async def require_organizer(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_organizer',
        attributes={
            'user.id': current_user.id,
            'user.role': current_user.role.value,
        },
    ):
        if not RoleAuthStrategy.can_create_event(current_user):
            raise ForbiddenError('Only organizers can perform this action')
        return current_user


async def require_admin(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    if not RoleAuthStrategy.can_refund(current_user):
        raise ForbiddenError('Only admins can perform this action')
    return current_user
