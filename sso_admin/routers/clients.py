import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from sso_admin.access import (
    is_super_admin,
    require_owner_or_super_admin,
    validate_grant_types,
    validate_scopes,
)
from sso_admin.database import get_db
from sso_admin.dependencies import require_admin
from sso_admin.errors import NotFound, ValidationFailed
from sso_admin.models.client import Client, generate_client_id, generate_client_secret
from sso_admin.schemas.client import Client as ClientSchema, ClientCreate, ClientUpdate
from sso_admin.security import Principal

router = APIRouter()
logger = logging.getLogger(__name__)

# client_id 撞號時重新產生的次數
CLIENT_ID_ATTEMPTS = 3


def get_client_or_404(db: Session, client_pk: int) -> Client:
    client = db.query(Client).options(joinedload(Client.owner)).filter(Client.id == client_pk).first()
    if not client:
        raise NotFound("Client not found")
    return client


@router.get("", response_model=List[ClientSchema])
def list_clients(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    query = db.query(Client).options(joinedload(Client.owner))
    # SuperAdmin 可看全部，其他人只看自己擁有的
    if not is_super_admin(principal):
        query = query.filter(Client.owner_id == principal.id)
    return query.order_by(Client.id).all()


@router.post("", response_model=ClientSchema, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    if not payload.name:
        raise ValidationFailed("Name is required")
    validate_scopes(payload.scopes)
    validate_grant_types(payload.grant_types)

    for attempt in range(1, CLIENT_ID_ATTEMPTS + 1):
        client = Client(
            name=payload.name,
            description=payload.description or "",
            client_id=generate_client_id(),
            client_secret=generate_client_secret(),
            scopes=list(payload.scopes or []),
            grant_types=list(payload.grant_types or []),
            owner_id=principal.id,
        )
        db.add(client)
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            if attempt == CLIENT_ID_ATTEMPTS:
                raise
            logger.warning("client_id 重複，重新產生 (第 %d 次)", attempt)

    db.refresh(client)
    logger.info("%s 建立 client %s (%s)", principal.email, client.id, client.client_id)
    return client


@router.get("/{client_pk}", response_model=ClientSchema)
def get_client(
    client_pk: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    client = get_client_or_404(db, client_pk)
    require_owner_or_super_admin(principal, client.owner_id)
    return client


@router.put("/{client_pk}", response_model=ClientSchema)
def update_client(
    client_pk: int,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    client = get_client_or_404(db, client_pk)
    require_owner_or_super_admin(principal, client.owner_id)
    validate_scopes(payload.scopes)
    validate_grant_types(payload.grant_types)

    # 未提供的欄位保留原值；description 可明確設為空字串
    if payload.name:
        client.name = payload.name
    if payload.description is not None:
        client.description = payload.description
    if payload.scopes is not None:
        client.scopes = list(payload.scopes)
    if payload.grant_types is not None:
        client.grant_types = list(payload.grant_types)

    db.commit()
    db.refresh(client)
    logger.info("%s 更新 client %s", principal.email, client.id)
    return client


@router.delete("/{client_pk}")
def delete_client(
    client_pk: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    client = get_client_or_404(db, client_pk)
    require_owner_or_super_admin(principal, client.owner_id)

    db.delete(client)
    db.commit()
    logger.info("%s 刪除 client %s", principal.email, client_pk)
    return {"message": "Client deleted successfully"}
