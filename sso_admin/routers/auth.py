from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from sso_admin.config import settings
from sso_admin.database import get_db
from sso_admin.dependencies import get_session_principal
from sso_admin.errors import Unauthorized
from sso_admin.schemas.auth import LoginResponse, Principal as PrincipalSchema
from sso_admin.security import Principal, authenticate, create_access_token

router = APIRouter()


def set_session_cookie(response: Response, access_token: str):
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # OAuth2 表單的 username 欄位放 email
    principal = authenticate(db, form_data.username, form_data.password)
    if principal is None:
        raise Unauthorized("Invalid email or password")

    access_token = create_access_token(principal)
    set_session_cookie(response, access_token)
    return {"principal": principal.to_dict(), "access_token": access_token, "token_type": "bearer"}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.COOKIE_NAME)
    return {"success": True}


@router.get("/session", response_model=PrincipalSchema)
def read_session(principal: Principal = Depends(get_session_principal)):
    return principal.to_dict()
