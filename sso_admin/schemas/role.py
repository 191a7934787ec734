from pydantic import BaseModel, ConfigDict
from typing import Optional

class RoleSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class Role(RoleSummary):
    description: Optional[str] = None
