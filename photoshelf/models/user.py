"""User model."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from photoshelf.models.types import UTCDateTime
from photoshelf.utils.dates import utcnow
from photoshelf.utils.ids import new_id


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    avatar_path: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
