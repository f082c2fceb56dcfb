"""Auth API Routes - Login, registration, logout, password and current user"""
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from ..deps import get_current_user_dep, read_payload
from ..negotiation import action_response, wants_json
from ...config.settings import settings
from ...domain.models import AuthContext
from ...services.auth_service import AuthService

router = APIRouter()

HOME_URL = "/dashboard"
LOGIN_URL = "/auth/login"
PROFILE_URL = "/users/profile"


class LoginBody(BaseModel):
    """Login with user name or email"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: Optional[str] = Field(None, alias="username")
    email: Optional[str] = None
    password: Optional[str] = None

    @property
    def login(self) -> str:
        return self.username or self.email or ""


class RegisterBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")
    department_id: Optional[int] = Field(None, alias="department")


class ChangePasswordBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class MeResponse(BaseModel):
    success: bool = True
    user: AuthContext


def _session_response(
    request: Request,
    token: str,
    ctx: AuthContext,
    message: str,
    status_code: int = status.HTTP_200_OK
):
    """Token in the body for API clients; HttpOnly cookie for everyone"""
    if wants_json(request):
        response = JSONResponse(status_code=status_code, content={
            "success": True,
            "message": message,
            "token": token,
            "user": ctx.model_dump(),
        })
    else:
        response = RedirectResponse(url=HOME_URL, status_code=status.HTTP_303_SEE_OTHER)

    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=settings.jwt_expires_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.post("/login")
async def login(request: Request):
    """
    Verify credentials and start a session.

    The token is returned in the body for API clients and always set as
    an HttpOnly cookie for browsers.
    """
    body = await read_payload(request, LoginBody)
    service = AuthService()
    token, ctx = service.login(body.login, body.password or "")
    return _session_response(request, token, ctx, "Đăng nhập thành công")


@router.post("/register")
async def register(request: Request):
    """
    Create an account with the default role and sign it in.

    Answers like login: token and user for API clients, cookie plus
    redirect for browsers.
    """
    body = await read_payload(request, RegisterBody)
    service = AuthService()
    token, ctx = service.register(
        body.username, body.email, body.password, body.confirm_password, body.department_id
    )
    return _session_response(
        request, token, ctx, "Đăng ký thành công", status_code=status.HTTP_201_CREATED
    )


@router.post("/logout")
async def logout(request: Request):
    """End the browser session (tokens themselves are stateless)."""
    if wants_json(request):
        response = JSONResponse(content={"success": True, "message": "Đã đăng xuất"})
    else:
        response = RedirectResponse(url=LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.auth_cookie_name)
    return response


@router.get("/me", response_model=MeResponse)
async def me(actor: AuthContext = Depends(get_current_user_dep)):
    return MeResponse(user=actor)


@router.post("/change-password")
async def change_password(
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Change the caller's password after checking the current one."""
    body = await read_payload(request, ChangePasswordBody)
    service = AuthService()
    service.change_password(actor, body.current_password, body.new_password)
    return action_response(request, "Đổi mật khẩu thành công", PROFILE_URL)
