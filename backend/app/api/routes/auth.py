from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger

from app.core.config import settings
from app.core.context import AppContext
from app.core.deps import get_context, get_current_user
from app.core.logging import username_ctx_var
from app.core.rate_limit import limiter
from app.core.security import create_session_token
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.geo import UserInfo
from app.services.user_store import UserAlreadyExistsError

router = APIRouter(tags=["auth"])


def _set_session_cookie(response: Response, context: AppContext, user: dict) -> None:
    cfg = context.settings
    token = create_session_token(user["username"], user.get("role") or "user", settings=cfg)
    response.set_cookie(
        key=cfg.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=cfg.COOKIE_SECURE,
        samesite=cfg.COOKIE_SAMESITE,
        domain=(cfg.COOKIE_DOMAIN or None),
        max_age=cfg.SESSION_EXPIRE_MINUTES * 60,
        path="/",
    )


@router.post("/auth/login", response_model=UserInfo)
@limiter.limit(settings.LOGIN_RATE)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    context: AppContext = Depends(get_context),
) -> UserInfo:
    user = await context.users.authenticate(payload.username, payload.password)
    if user is None:
        logger.bind(username=payload.username).warning("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    request.state.username = user["username"]
    username_ctx_var.set(user["username"])
    _set_session_cookie(response, context, user)
    logger.info("login_succeeded")
    return UserInfo(username=user["username"], role=user.get("role") or "user")


@router.post("/auth/register", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    response: Response,
    context: AppContext = Depends(get_context),
) -> UserInfo:
    try:
        user = await context.users.register(
            payload.username, payload.password, email=payload.email
        )
    except UserAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Username already exists"
        )
    _set_session_cookie(response, context, user)
    return UserInfo(username=user["username"], role=user["role"])


@router.post("/auth/logout")
async def logout(response: Response, context: AppContext = Depends(get_context)):
    cfg = context.settings
    response.delete_cookie(
        key=cfg.SESSION_COOKIE_NAME,
        domain=(cfg.COOKIE_DOMAIN or None),
        path="/",
    )
    return {"ok": True}


@router.get("/user/info", response_model=UserInfo)
async def user_info(user: UserInfo = Depends(get_current_user)) -> UserInfo:
    return user
