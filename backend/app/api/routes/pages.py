"""HTML entry points around the login gate."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, RedirectResponse

from app.core.context import AppContext
from app.core.deps import get_context, get_optional_user
from app.schemas.geo import UserInfo

router = APIRouter(tags=["pages"], include_in_schema=False)


def _page(context: AppContext, name: str) -> FileResponse:
    path = context.settings.STATIC_DIR / name
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return FileResponse(path, media_type="text/html")


@router.get("/")
async def index() -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login")
async def login_page(context: AppContext = Depends(get_context)):
    return _page(context, "login.html")


@router.get("/home")
async def home_page(
    context: AppContext = Depends(get_context),
    user: UserInfo | None = Depends(get_optional_user),
):
    if user is None:
        return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    return _page(context, "home.html")
