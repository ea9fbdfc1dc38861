"""Album API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from photoshelf.api.deps import get_current_user
from photoshelf.database import get_session
from photoshelf.models.user import User
from photoshelf.schemas.album import (
    AlbumAssetsRequest,
    AlbumCreateRequest,
    AlbumResponse,
    AlbumShareRequest,
    AlbumStatisticsResponse,
    AlbumUpdateRequest,
)
from photoshelf.services import album_service

router = APIRouter(prefix="/albums", tags=["albums"])


@router.get("", response_model=list[AlbumResponse])
def list_albums(
    shared: Optional[bool] = Query(default=None),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """List albums: shared=true shared with me, shared=false mine, omitted both."""
    return album_service.list_albums(user.id, shared, session)


@router.get("/statistics", response_model=AlbumStatisticsResponse)
def album_statistics(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return album_service.get_album_statistics(user.id, session)


@router.post("", response_model=AlbumResponse, status_code=201)
def create_album(
    request: AlbumCreateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Create an album, optionally seeded with assets and shared users."""
    return album_service.create_album(user.id, request, session)


@router.get("/{album_id}", response_model=AlbumResponse)
def get_album(
    album_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Get album details with owner, shared users and assets."""
    return album_service.get_album(album_id, user.id, session)


@router.patch("/{album_id}", response_model=AlbumResponse)
def update_album(
    album_id: str,
    request: AlbumUpdateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Update album properties (owner only)."""
    return album_service.update_album(album_id, user.id, request, session)


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_album(
    album_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Delete an album (does not delete the assets)."""
    album_service.delete_album(album_id, user.id, session)


@router.put("/{album_id}/assets", response_model=AlbumResponse)
def add_assets_to_album(
    album_id: str,
    request: AlbumAssetsRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return album_service.add_assets(album_id, user.id, request.ids, session)


@router.delete("/{album_id}/assets", response_model=AlbumResponse)
def remove_assets_from_album(
    album_id: str,
    request: AlbumAssetsRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return album_service.remove_assets(album_id, user.id, request.ids, session)


@router.put("/{album_id}/users", response_model=AlbumResponse)
def share_album(
    album_id: str,
    request: AlbumShareRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Share an album with other users (owner only)."""
    return album_service.add_shared_users(album_id, user.id, request.user_ids, session, role=request.role)


@router.delete("/{album_id}/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def unshare_album(
    album_id: str,
    user_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    album_service.remove_shared_user(album_id, user.id, user_id, session)
