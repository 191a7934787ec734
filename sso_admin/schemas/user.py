from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from sso_admin.schemas.role import RoleSummary

class UserSummary(BaseModel):
    id: int
    name: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)


class User(UserSummary):
    role: RoleSummary


class UserRoleUpdate(BaseModel):
    role_id: Optional[int] = Field(default=None, alias="roleId")

    model_config = ConfigDict(populate_by_name=True)
