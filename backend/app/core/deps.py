from fastapi import Depends, HTTPException, Request, status

from app.core.context import AppContext
from app.core.errors import InvalidParameterError
from app.core.logging import username_ctx_var
from app.core.security import decode_session_token
from app.schemas.geo import UserInfo


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def required_param(name: str, value: str) -> str:
    """Strip a path parameter; blank values are a 400."""

    value = value.strip()
    if not value:
        raise InvalidParameterError(f"{name} is required")
    return value


def get_optional_user(
    request: Request,
    context: AppContext = Depends(get_context),
) -> UserInfo | None:
    settings = context.settings
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    payload = decode_session_token(token, settings=settings)
    if payload is None:
        return None
    user = context.users.get(payload["sub"])
    if user is None:
        return None
    request.state.username = user["username"]
    username_ctx_var.set(user["username"])
    return UserInfo(username=user["username"], role=user.get("role") or "user")


def get_current_user(user: UserInfo | None = Depends(get_optional_user)) -> UserInfo:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return user
