"""Album models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from photoshelf.models.types import UTCDateTime
from photoshelf.utils.dates import utcnow
from photoshelf.utils.ids import new_id


class AlbumOrder(str, Enum):
    DESC = "desc"  # newest asset first
    ASC = "asc"


class AlbumUserRole(str, Enum):
    # Recorded for clients; every shared user may contribute assets
    EDITOR = "editor"
    VIEWER = "viewer"


class Album(SQLModel, table=True):
    __tablename__ = "albums"

    id: str = Field(default_factory=new_id, primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True)
    name: str
    description: str = Field(default="")
    is_activity_enabled: bool = Field(default=True)
    order: AlbumOrder = Field(default=AlbumOrder.DESC)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class AlbumAsset(SQLModel, table=True):
    __tablename__ = "album_assets"
    __table_args__ = (UniqueConstraint("album_id", "asset_id", name="uq_album_assets"),)

    # Surrogate key doubles as the stored member order
    id: Optional[int] = Field(default=None, primary_key=True)
    album_id: str = Field(foreign_key="albums.id", index=True)
    asset_id: str = Field(foreign_key="assets.id", index=True)
    added_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class AlbumSharedUser(SQLModel, table=True):
    __tablename__ = "album_shared_users"
    __table_args__ = (UniqueConstraint("album_id", "user_id", name="uq_album_shared_users"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    album_id: str = Field(foreign_key="albums.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    role: AlbumUserRole = Field(default=AlbumUserRole.EDITOR)
    added_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
