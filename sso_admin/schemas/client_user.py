from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from sso_admin.schemas.client import ClientSummary
from sso_admin.schemas.user import UserSummary

class ClientUserCreate(BaseModel):
    client_id: Optional[int] = Field(default=None, alias="clientId")
    user_id: Optional[int] = Field(default=None, alias="userId")
    role: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ClientUser(BaseModel):
    id: int
    user_id: int = Field(serialization_alias="userId")
    client_id: int = Field(serialization_alias="clientId")
    role: str
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    user: UserSummary
    client: ClientSummary

    model_config = ConfigDict(from_attributes=True)
