from typing import Literal, Optional
from pydantic import BaseModel

Role = Literal["teacher", "student"]


class UserContext(BaseModel):
    user_id: str
    role: Role
    name: Optional[str] = None
    email: Optional[str] = None
