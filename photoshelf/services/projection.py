"""Map stored records into response schemas, deriving computed album fields."""

from datetime import datetime
from typing import Optional

from photoshelf.models.album import Album, AlbumUserRole
from photoshelf.models.asset import Asset
from photoshelf.models.user import User
from photoshelf.schemas.album import AlbumResponse, AlbumUserResponse
from photoshelf.schemas.asset import AssetResponse
from photoshelf.schemas.user import UserResponse
from photoshelf.utils.dates import to_utc


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar_path=user.avatar_path,
    )


def asset_to_response(asset: Asset) -> AssetResponse:
    return AssetResponse.model_validate(asset, from_attributes=True)


def album_date_range(assets: list[Asset]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Earliest and latest capture time of the members (upload time when unknown)."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    for asset in assets:
        taken = to_utc(asset.file_created_at or asset.created_at)
        if start is None or taken < start:
            start = taken
        if end is None or taken > end:
            end = taken
    return start, end


def album_to_response(
    album: Album,
    owner: Optional[User],
    shared_users: list[User],
    assets: list[Asset],
    roles: Optional[dict[str, AlbumUserRole]] = None,
) -> AlbumResponse:
    """``roles`` maps shared user id to role; users missing from it are editors."""
    roles = roles or {}
    start_date, end_date = album_date_range(assets)
    last_modified = max((to_utc(a.updated_at) for a in assets), default=None)

    return AlbumResponse(
        id=album.id,
        name=album.name,
        description=album.description,
        owner_id=album.owner_id,
        owner=user_to_response(owner) if owner else None,
        shared_users=[user_to_response(u) for u in shared_users],
        album_users=[
            AlbumUserResponse(user=user_to_response(u), role=roles.get(u.id, AlbumUserRole.EDITOR))
            for u in shared_users
        ],
        shared=len(shared_users) > 0,
        is_activity_enabled=album.is_activity_enabled,
        order=album.order,
        assets=[asset_to_response(a) for a in assets],
        asset_count=len(assets),
        album_thumbnail_asset_id=assets[0].id if assets else None,
        start_date=start_date,
        end_date=end_date,
        last_modified_asset_timestamp=last_modified,
        created_at=album.created_at,
        updated_at=album.updated_at,
    )
