"""Album request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from photoshelf.models.album import AlbumOrder, AlbumUserRole
from photoshelf.schemas.asset import AssetResponse
from photoshelf.schemas.user import UserResponse


class AlbumCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    asset_ids: list[str] = []
    shared_with: list[str] = []  # user IDs


class AlbumUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_activity_enabled: Optional[bool] = None
    order: Optional[AlbumOrder] = None


class AlbumAssetsRequest(BaseModel):
    ids: list[str]  # asset IDs


class AlbumShareRequest(BaseModel):
    user_ids: list[str]
    role: AlbumUserRole = AlbumUserRole.EDITOR


class AlbumUserResponse(BaseModel):
    user: UserResponse
    role: AlbumUserRole


class AlbumResponse(BaseModel):
    id: str
    name: str
    description: str
    owner_id: str
    owner: Optional[UserResponse]
    shared_users: list[UserResponse]
    album_users: list[AlbumUserResponse]
    shared: bool
    has_shared_link: bool = False
    is_activity_enabled: bool
    order: AlbumOrder
    assets: list[AssetResponse]
    asset_count: int
    album_thumbnail_asset_id: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    last_modified_asset_timestamp: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class AlbumStatisticsResponse(BaseModel):
    owned: int
    shared: int
    not_shared: int
