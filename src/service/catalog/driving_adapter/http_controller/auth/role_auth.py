from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.catalog.driving_adapter.http_controller.auth.jwt_auth import JwtAuth, Principal


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Principal:
    """Stateless: everything comes from the verified token."""
    return await jwt_auth.verify(credentials.credentials if credentials else None)


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_admin',
        attributes={'principal.subject': principal.subject},
    ):
        if not principal.has_scope(settings.ADMIN_SCOPE):
            raise ForbiddenError(f'The {settings.ADMIN_SCOPE} scope is required')
        return principal
