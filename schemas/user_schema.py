from typing import Optional
from pydantic import BaseModel


class PublicMetadata(BaseModel):
    userType: Optional[str] = None  # "student" | "teacher"
    settings: Optional[dict] = None


class UserUpdate(BaseModel):
    publicMetadata: PublicMetadata


class UserResponse(BaseModel):
    message: str
    data: dict
