from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from sso_admin.schemas.user import UserSummary

class ClientBase(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    scopes: Optional[List[str]] = None
    grant_types: Optional[List[str]] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(ClientBase):
    pass


class ClientSummary(BaseModel):
    id: int
    name: str
    client_id: str

    model_config = ConfigDict(from_attributes=True)


class Client(ClientSummary):
    client_secret: str
    description: str = ""
    scopes: List[str] = []
    grant_types: List[str] = []
    owner_id: int = Field(serialization_alias="ownerId")
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")
    owner: Optional[UserSummary] = None
