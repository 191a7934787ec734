import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from sso_admin.access import check_role_assignment
from sso_admin.database import get_db
from sso_admin.dependencies import require_admin
from sso_admin.errors import NotFound, ValidationFailed
from sso_admin.models.role import Role
from sso_admin.models.user import User
from sso_admin.schemas.user import User as UserSchema, UserRoleUpdate
from sso_admin.security import Principal

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[UserSchema])
def list_users(
    role: Optional[str] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    query = db.query(User).options(joinedload(User.role))
    if role:
        query = query.join(User.role).filter(Role.name == role)
    return query.order_by(User.id).all()


@router.patch("/{user_id}/role", response_model=UserSchema)
def update_user_role(
    user_id: int,
    payload: UserRoleUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    if not payload.role_id:
        raise ValidationFailed("Role ID is required")

    user = db.query(User).options(joinedload(User.role)).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")

    role = db.query(Role).filter(Role.id == payload.role_id).first()
    if not role:
        raise NotFound("Role not found")

    previous_role = user.role.name
    check_role_assignment(principal, previous_role, role.name)

    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("%s 將 %s 的角色由 %s 改為 %s", principal.email, user.email, previous_role, role.name)
    return user
