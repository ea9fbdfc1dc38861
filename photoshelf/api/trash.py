"""Trash API endpoints."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from photoshelf.api.deps import get_current_user
from photoshelf.database import get_session
from photoshelf.models.user import User
from photoshelf.schemas.asset import AssetCountResponse, AssetIdsRequest
from photoshelf.services import asset_service

router = APIRouter(prefix="/trash", tags=["trash"])


@router.post("/assets", response_model=AssetCountResponse)
def trash_assets(
    request: AssetIdsRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Move assets to the trash. Assets owned by others are skipped."""
    return AssetCountResponse(count=asset_service.trash_assets(user.id, request.ids, session))


@router.post("/restore/assets", response_model=AssetCountResponse)
def restore_assets(
    request: AssetIdsRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return AssetCountResponse(count=asset_service.restore_assets(user.id, request.ids, session))


@router.post("/restore", response_model=AssetCountResponse)
def restore_trash(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return AssetCountResponse(count=asset_service.restore_all(user.id, session))


@router.post("/empty", response_model=AssetCountResponse)
def empty_trash(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Permanently delete everything in the trash."""
    return AssetCountResponse(count=asset_service.empty_trash(user.id, session))
