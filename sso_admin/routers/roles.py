from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sso_admin.access import visible_role_names
from sso_admin.database import get_db
from sso_admin.dependencies import require_admin
from sso_admin.models.role import Role
from sso_admin.schemas.role import Role as RoleSchema
from sso_admin.security import Principal

router = APIRouter()


@router.get("", response_model=List[RoleSchema])
def list_roles(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    query = db.query(Role)
    # SuperAdmin 看全部角色，Admin 看不到 SuperAdmin
    names = visible_role_names(principal)
    if names is not None:
        query = query.filter(Role.name.in_(names))
    return query.order_by(Role.id).all()
