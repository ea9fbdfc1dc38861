"""Album store: creation, mutation, membership edits and access-scoped retrieval.

Access rule: the owner and any shared user may read an album and edit its
asset membership. Renaming, deleting and managing shared users is reserved
for the owner; a shared user attempting it gets ForbiddenError, anyone else
gets NotFoundError so private albums never reveal that they exist.
"""

import logging
from typing import Optional

from sqlmodel import Session

from photoshelf.database import storage_errors, transaction
from photoshelf.errors import ForbiddenError, InvalidInputError, NotFoundError
from photoshelf.models.album import Album, AlbumUserRole
from photoshelf.models.user import User
from photoshelf.repositories.album_repository import AlbumRepository
from photoshelf.repositories.asset_repository import AssetRepository
from photoshelf.schemas.album import (
    AlbumCreateRequest,
    AlbumResponse,
    AlbumStatisticsResponse,
    AlbumUpdateRequest,
)
from photoshelf.services.projection import album_to_response
from photoshelf.utils.dates import utcnow
from photoshelf.utils.ids import parse_id, parse_ids

logger = logging.getLogger(__name__)


def _accessible_album(repo: AlbumRepository, album_id: str, caller_id: str) -> tuple[Album, bool]:
    """Return (album, caller_is_owner) or raise NotFoundError when the caller has no access."""
    album = repo.get(album_id)
    if not album:
        raise NotFoundError("Album not found")
    if album.owner_id == caller_id:
        return album, True
    if repo.is_shared_user(album_id, caller_id):
        return album, False
    raise NotFoundError("Album not found")


def _owned_album(repo: AlbumRepository, album_id: str, caller_id: str) -> Album:
    album, is_owner = _accessible_album(repo, album_id, caller_id)
    if not is_owner:
        raise ForbiddenError("Only the album owner can do this")
    return album


def _require_users(repo: AlbumRepository, user_ids: list[str]) -> None:
    missing = set(user_ids) - repo.existing_user_ids(user_ids)
    if missing:
        raise NotFoundError("User not found")


def _require_assets(session: Session, asset_ids: list[str]) -> None:
    missing = set(asset_ids) - AssetRepository(session).existing_ids(asset_ids)
    if missing:
        raise NotFoundError("Asset not found")


def _album_view(repo: AlbumRepository, album: Album) -> AlbumResponse:
    owner = repo.session.get(User, album.owner_id)
    shared = repo.get_shared_users(album.id)
    return album_to_response(
        album,
        owner=owner,
        shared_users=[user for user, _ in shared],
        assets=repo.get_assets(album.id),
        roles={user.id: role for user, role in shared},
    )


def list_albums(caller_id: str, shared: Optional[bool], session: Session) -> list[AlbumResponse]:
    """shared=True: albums shared with the caller; False: owned; None: both."""
    caller_id = parse_id(caller_id, "user id")
    repo = AlbumRepository(session)
    with storage_errors():
        if shared is True:
            albums = repo.list_shared_with(caller_id)
        elif shared is False:
            albums = repo.list_owned(caller_id)
        else:
            albums = repo.list_accessible(caller_id)
        return [_album_view(repo, a) for a in albums]


def get_album(album_id: str, caller_id: str, session: Session) -> AlbumResponse:
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    repo = AlbumRepository(session)
    with storage_errors():
        album, _ = _accessible_album(repo, album_id, caller_id)
        return _album_view(repo, album)


def get_album_statistics(caller_id: str, session: Session) -> AlbumStatisticsResponse:
    caller_id = parse_id(caller_id, "user id")
    with storage_errors():
        return AlbumStatisticsResponse(**AlbumRepository(session).statistics(caller_id))


def create_album(owner_id: str, request: AlbumCreateRequest, session: Session) -> AlbumResponse:
    """Create the album, its shared users and its assets as one atomic unit.

    A missing user or asset aborts the whole creation; no partial album is left behind.
    """
    owner_id = parse_id(owner_id, "user id")
    asset_ids = parse_ids(request.asset_ids, "asset id")
    user_ids = parse_ids(request.shared_with, "user id")
    if owner_id in user_ids:
        raise InvalidInputError("Cannot share an album with its owner")

    repo = AlbumRepository(session)
    with transaction(session):
        album = repo.insert(Album(
            owner_id=owner_id,
            name=request.name,
            description=request.description or "",
        ))

        _require_users(repo, user_ids)
        repo.insert_shared_user_rows(album.id, user_ids)

        _require_assets(session, asset_ids)
        repo.insert_album_asset_rows(album.id, asset_ids)

    with storage_errors():
        logger.info(
            "Created album %s for user %s (%d assets, %d shared users)",
            album.id, owner_id, len(asset_ids), len(user_ids),
        )
        return _album_view(repo, album)


def update_album(album_id: str, caller_id: str, request: AlbumUpdateRequest, session: Session) -> AlbumResponse:
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    repo = AlbumRepository(session)

    with transaction(session):
        album = _owned_album(repo, album_id, caller_id)
        if request.name is not None:
            album.name = request.name
        if request.description is not None:
            album.description = request.description
        if request.is_activity_enabled is not None:
            album.is_activity_enabled = request.is_activity_enabled
        if request.order is not None:
            album.order = request.order
        album.updated_at = utcnow()
        session.add(album)

    with storage_errors():
        return _album_view(repo, album)


def delete_album(album_id: str, caller_id: str, session: Session) -> None:
    """Delete memberships, shares and the album itself in one transaction."""
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    repo = AlbumRepository(session)

    with transaction(session):
        _owned_album(repo, album_id, caller_id)
        repo.delete_album(album_id)
    logger.info("Deleted album %s", album_id)


def add_assets(album_id: str, caller_id: str, asset_ids: list[str], session: Session) -> AlbumResponse:
    """Attach assets to an album; ids already present are skipped.

    The caller needs access to the album but not ownership of the assets.
    """
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    ids = parse_ids(asset_ids, "asset id")
    repo = AlbumRepository(session)

    with transaction(session):
        album, _ = _accessible_album(repo, album_id, caller_id)
        _require_assets(session, ids)
        present = repo.member_asset_ids(album_id, ids)
        new_ids = [i for i in ids if i not in present]
        repo.insert_album_asset_rows(album_id, new_ids)

    with storage_errors():
        logger.info("Added %d assets to album %s (%d already present)", len(new_ids), album_id, len(present))
        return _album_view(repo, album)


def remove_assets(album_id: str, caller_id: str, asset_ids: list[str], session: Session) -> AlbumResponse:
    """Detach assets from an album; ids that aren't members are ignored."""
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    ids = parse_ids(asset_ids, "asset id")
    repo = AlbumRepository(session)

    with transaction(session):
        album, _ = _accessible_album(repo, album_id, caller_id)
        removed = repo.delete_album_asset_rows(album_id, ids)

    with storage_errors():
        logger.info("Removed %d assets from album %s", removed, album_id)
        return _album_view(repo, album)


def add_shared_users(
    album_id: str,
    caller_id: str,
    user_ids: list[str],
    session: Session,
    role: AlbumUserRole = AlbumUserRole.EDITOR,
) -> AlbumResponse:
    """Share with users; users already present keep access and take the new role."""
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    ids = parse_ids(user_ids, "user id")
    repo = AlbumRepository(session)

    with transaction(session):
        album = _owned_album(repo, album_id, caller_id)
        if album.owner_id in ids:
            raise InvalidInputError("Cannot share an album with its owner")
        _require_users(repo, ids)
        repo.insert_shared_user_rows(album_id, ids, role)

    with storage_errors():
        logger.info("Shared album %s with %d users as %s", album_id, len(ids), role.value)
        return _album_view(repo, album)


def remove_shared_user(album_id: str, caller_id: str, user_id: str, session: Session) -> None:
    album_id = parse_id(album_id, "album id")
    caller_id = parse_id(caller_id, "user id")
    user_id = parse_id(user_id, "user id")
    repo = AlbumRepository(session)

    with transaction(session):
        _owned_album(repo, album_id, caller_id)
        removed = repo.delete_shared_user_row(album_id, user_id)
    logger.info("Unshared album %s from user %s (%d rows)", album_id, user_id, removed)
