"""Asset model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from photoshelf.models.types import UTCDateTime
from photoshelf.utils.dates import utcnow
from photoshelf.utils.ids import new_id


class AssetType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class Asset(SQLModel, table=True):
    __tablename__ = "assets"
    __table_args__ = (
        # Client-local idempotency key: one row per device asset per owner
        UniqueConstraint("owner_id", "device_id", "device_asset_id", name="uq_assets_device_key"),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True)
    device_asset_id: str
    device_id: str
    type: AssetType
    original_path: str
    original_file_name: str
    resize_path: Optional[str] = None  # JPEG preview
    webp_path: Optional[str] = None
    thumbhash_path: Optional[str] = None
    encoded_video_path: Optional[str] = None
    duration: Optional[str] = None  # e.g. "0:00:12.345"
    checksum: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_visible: bool = Field(default=True)
    is_favorite: bool = Field(default=False)
    is_archived: bool = Field(default=False)
    is_trashed: bool = Field(default=False, index=True)
    trashed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    file_created_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime, index=True)  # capture time
    file_modified_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    library_id: Optional[str] = Field(default=None, index=True)
    stack_parent_id: Optional[str] = Field(default=None, foreign_key="assets.id")
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
