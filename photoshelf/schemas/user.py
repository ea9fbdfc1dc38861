"""User response schema."""

from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    avatar_path: Optional[str] = None
