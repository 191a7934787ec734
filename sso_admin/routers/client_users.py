import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from sso_admin.access import is_super_admin, require_owner_or_super_admin
from sso_admin.database import get_db
from sso_admin.dependencies import require_admin
from sso_admin.errors import Conflict, NotFound, ValidationFailed
from sso_admin.models.client import Client
from sso_admin.models.client_user import ClientUser
from sso_admin.models.user import User
from sso_admin.schemas.client_user import ClientUser as ClientUserSchema, ClientUserCreate
from sso_admin.security import Principal

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_ROLE_LENGTH = 50


def _with_relations(query):
    return query.options(joinedload(ClientUser.user), joinedload(ClientUser.client))


@router.get("", response_model=List[ClientUserSchema])
def list_client_users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    query = _with_relations(db.query(ClientUser))
    # Admin 只看自己擁有的 client 的指派
    if not is_super_admin(principal):
        query = query.join(ClientUser.client).filter(Client.owner_id == principal.id)
    return query.order_by(ClientUser.id).all()


@router.post("", response_model=ClientUserSchema, status_code=status.HTTP_201_CREATED)
def create_client_user(
    payload: ClientUserCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    role = (payload.role or "").strip()
    if not payload.client_id or not payload.user_id or not role:
        raise ValidationFailed("Missing required fields")
    if len(role) > MAX_ROLE_LENGTH:
        raise ValidationFailed(f"Role must be at most {MAX_ROLE_LENGTH} characters")

    client = db.query(Client).filter(Client.id == payload.client_id).first()
    if not client:
        raise NotFound("Client not found")

    user = db.query(User).filter(User.id == payload.user_id).first()
    if not user:
        raise NotFound("User not found")

    require_owner_or_super_admin(
        principal, client.owner_id,
        "You do not have permission to assign users to this client"
    )

    # 重複指派由 (user_id, client_id) 唯一約束擋下
    assignment = ClientUser(client_id=client.id, user_id=user.id, role=role)
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User is already assigned to this client")

    assignment = _with_relations(db.query(ClientUser)).filter(ClientUser.id == assignment.id).one()
    logger.info("%s 將 %s 指派到 client %s (%s)", principal.email, user.email, client.id, role)
    return assignment


@router.delete("/{assignment_id}")
def delete_client_user(
    assignment_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    assignment = db.query(ClientUser).options(joinedload(ClientUser.client)).filter(
        ClientUser.id == assignment_id
    ).first()
    if not assignment:
        raise NotFound("Client user not found")

    require_owner_or_super_admin(
        principal, assignment.client.owner_id,
        "You do not have permission to remove users from this client"
    )

    db.delete(assignment)
    db.commit()
    logger.info("%s 移除指派 %s", principal.email, assignment_id)
    return {"success": True}
