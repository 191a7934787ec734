from pydantic import BaseModel
from typing import Optional, List

class Principal(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: str
    role: Optional[str] = None
    permissions: List[str] = []


class LoginResponse(BaseModel):
    principal: Principal
    access_token: str
    token_type: str = "bearer"
