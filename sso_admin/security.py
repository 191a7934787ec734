import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session, joinedload

from sso_admin.config import settings
from sso_admin.models.role import Role
from sso_admin.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """已登入的身分；permissions 為登入當下的快照"""
    id: int
    name: Optional[str]
    email: str
    role: str
    permissions: List[str] = field(default_factory=list)

    @classmethod
    def from_user(cls, user, permissions=None):
        if permissions is None:
            permissions = user.role.permission_names
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.name,
            permissions=list(permissions),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "permissions": list(self.permissions),
        }


def load_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).options(
        joinedload(User.role).joinedload(Role.permissions)
    ).filter(User.email == email).first()


def authenticate(db: Session, email: str, password: str) -> Optional[Principal]:
    """
    以 email/密碼驗證用戶

    Returns:
        Principal: 驗證成功時的身分，失敗時為 None
    """
    if not email or not password:
        return None

    user = load_user_by_email(db, email)
    if not user or not user.verify_password(password):
        logger.info("登入失敗: %s", email)
        return None

    logger.info("登入成功: %s (%s)", email, user.role.name)
    return Principal.from_user(user)


def create_access_token(principal: Principal, expires_delta: timedelta = None) -> str:
    """
    創建訪問令牌

    令牌內含角色與權限快照，重新登入前不會更新。
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": principal.email,
        "uid": principal.id,
        "name": principal.name,
        "role": principal.role,
        "permissions": list(principal.permissions),
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def principal_from_claims(payload: dict) -> Principal:
    return Principal(
        id=payload.get("uid"),
        name=payload.get("name"),
        email=payload["sub"],
        role=payload.get("role"),
        permissions=list(payload.get("permissions") or []),
    )
