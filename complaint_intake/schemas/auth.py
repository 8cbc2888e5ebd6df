from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
