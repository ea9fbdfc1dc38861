"""Asset request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from photoshelf.models.asset import AssetType
from photoshelf.utils.dates import to_utc


class AssetCreateRequest(BaseModel):
    device_asset_id: str = Field(min_length=1)
    device_id: str = Field(min_length=1)
    type: AssetType
    original_path: str = Field(min_length=1)
    original_file_name: str = Field(min_length=1)
    resize_path: Optional[str] = None
    webp_path: Optional[str] = None
    thumbhash_path: Optional[str] = None
    encoded_video_path: Optional[str] = None
    duration: Optional[str] = None
    checksum: Optional[str] = None
    # None means "use the default", not False
    is_visible: Optional[bool] = None
    is_favorite: Optional[bool] = None
    is_archived: Optional[bool] = None
    file_created_at: Optional[datetime] = None
    file_modified_at: Optional[datetime] = None
    library_id: Optional[str] = None

    @field_validator("file_created_at", "file_modified_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class AssetBulkUploadRequest(BaseModel):
    assets: list[AssetCreateRequest]


class AssetUpdateRequest(BaseModel):
    is_favorite: Optional[bool] = None
    is_archived: Optional[bool] = None
    description: Optional[str] = None
    file_created_at: Optional[datetime] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("file_created_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class AssetSearchFilters(BaseModel):
    """Listing filters. Every field is optional; None means "don't filter"."""

    type: Optional[AssetType] = None
    is_favorite: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_trashed: Optional[bool] = None
    library_id: Optional[str] = None
    taken_after: Optional[datetime] = None
    taken_before: Optional[datetime] = None
    original_path: Optional[str] = None  # substring match

    @field_validator("taken_after", "taken_before")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class AssetResponse(BaseModel):
    id: str
    owner_id: str
    device_asset_id: str
    device_id: str
    type: AssetType
    original_path: str
    original_file_name: str
    resize_path: Optional[str]
    webp_path: Optional[str]
    thumbhash_path: Optional[str]
    encoded_video_path: Optional[str]
    duration: Optional[str]
    checksum: Optional[str]
    description: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    is_visible: bool
    is_favorite: bool
    is_archived: bool
    is_trashed: bool
    trashed_at: Optional[datetime]
    file_created_at: Optional[datetime]
    file_modified_at: Optional[datetime]
    library_id: Optional[str]
    stack_parent_id: Optional[str]
    created_at: datetime
    updated_at: datetime


class AssetListResponse(BaseModel):
    assets: list[AssetResponse]
    page: int
    size: int


class AssetCheckExistingRequest(BaseModel):
    device_asset_ids: list[str]
    device_id: str = Field(min_length=1)


class AssetCheckExistingResponse(BaseModel):
    existing: dict[str, bool]


class AssetIdsRequest(BaseModel):
    ids: list[str]


class AssetCountResponse(BaseModel):
    count: int


class AssetStatsResponse(BaseModel):
    images: int
    videos: int
    total: int
