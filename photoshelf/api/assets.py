"""Asset API endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from photoshelf.api.deps import get_current_user
from photoshelf.config import settings
from photoshelf.database import get_session
from photoshelf.models.user import User
from photoshelf.schemas.asset import (
    AssetBulkUploadRequest,
    AssetCheckExistingRequest,
    AssetCheckExistingResponse,
    AssetCreateRequest,
    AssetListResponse,
    AssetResponse,
    AssetSearchFilters,
    AssetStatsResponse,
    AssetUpdateRequest,
)
from photoshelf.services import asset_service

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("", response_model=AssetListResponse)
def list_assets(
    filters: AssetSearchFilters = Depends(),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=settings.default_page_size, ge=0, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """List my assets, newest first."""
    assets = asset_service.list_assets(user.id, filters, session, page=page, size=size)
    return AssetListResponse(assets=assets, page=page, size=size)


@router.post("", response_model=AssetResponse, status_code=201)
def create_asset(
    request: AssetCreateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return asset_service.create_asset(user.id, request, session)


@router.post("/bulk-upload-check", response_model=list[AssetResponse])
def bulk_upload_check(
    request: AssetBulkUploadRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Create all assets not already on the server; returns only the new ones."""
    return asset_service.bulk_upload_check(user.id, request.assets, session)


@router.post("/exist", response_model=AssetCheckExistingResponse)
def check_existing_assets(
    request: AssetCheckExistingRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Check which device asset ids are already uploaded (for deduplication before upload)."""
    existing = asset_service.check_existing(user.id, request.device_asset_ids, request.device_id, session)
    return AssetCheckExistingResponse(existing=existing)


@router.get("/statistics", response_model=AssetStatsResponse)
def asset_statistics(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return asset_service.get_statistics(user.id, session)


@router.get("/memory-lane", response_model=list[AssetResponse])
def memory_lane(
    day: int = Query(ge=1, le=31),
    month: int = Query(ge=1, le=12),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Assets from this day in previous years."""
    return asset_service.get_memory_lane(user.id, day, month, session)


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(
    asset_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return asset_service.get_asset(asset_id, user.id, session)


@router.get("/{asset_id}/thumbnail")
def get_thumbnail(
    asset_id: str,
    fmt: str = Query(default="WEBP", alias="format"),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Storage path of the thumbnail (format WEBP or JPEG, any case); the file service resolves it."""
    return {"path": asset_service.get_thumbnail_path(asset_id, user.id, fmt, session)}


@router.put("/{asset_id}", response_model=AssetResponse)
def update_asset(
    asset_id: str,
    request: AssetUpdateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Update asset flags (favorite, archived) and metadata."""
    return asset_service.update_asset(asset_id, user.id, request, session)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    asset_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Permanently delete an asset and remove it from every album."""
    asset_service.delete_asset(asset_id, user.id, session)
