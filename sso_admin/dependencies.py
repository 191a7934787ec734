from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sso_admin.access import ADMIN_ROLES, require_role
from sso_admin.config import settings
from sso_admin.database import get_db
from sso_admin.errors import Unauthorized
from sso_admin.security import (
    Principal,
    decode_access_token,
    load_user_by_email,
    principal_from_claims,
)


def _strip_bearer(value):
    if value and value.startswith("Bearer "):
        return value[len("Bearer "):]
    return None


def get_token_from_cookie(request: Request) -> Optional[str]:
    """從 cookie 取得令牌，沒有時再看 Authorization 標頭"""
    token = _strip_bearer(request.cookies.get(settings.COOKIE_NAME))
    if token:
        return token
    return _strip_bearer(request.headers.get("authorization"))


def _load_principal(db: Session, token: Optional[str]) -> Optional[Principal]:
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None:
        return None

    # 角色以資料庫目前的值為準，權限清單沿用登入時的快照
    user = load_user_by_email(db, payload["sub"])
    if user is None:
        return None
    return Principal.from_user(user, permissions=payload.get("permissions") or [])


def get_current_principal(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token_from_cookie)
) -> Principal:
    principal = _load_principal(db, token)
    if principal is None:
        raise Unauthorized()
    return principal


def get_current_principal_optional(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token_from_cookie)
) -> Optional[Principal]:
    """獲取當前身分，如果未登入則返回None"""
    return _load_principal(db, token)


def get_session_principal(token: Optional[str] = Depends(get_token_from_cookie)) -> Principal:
    """令牌內的身分快照，不查資料庫"""
    payload = decode_access_token(token) if token else None
    if payload is None:
        raise Unauthorized()
    return principal_from_claims(payload)


def role_required(*allowed_roles: str):
    """
    檢查當前身分的角色是否在允許清單內

    Args:
        allowed_roles: 允許的角色名稱
    """
    def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        return require_role(principal, allowed_roles)
    return role_checker


require_admin = role_required(*ADMIN_ROLES)
