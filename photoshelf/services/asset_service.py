"""Asset store: listing, creation with duplicate detection, trash/restore/delete lifecycle."""

import logging
from typing import Optional

from sqlmodel import Session

from photoshelf.config import settings
from photoshelf.database import storage_errors, transaction
from photoshelf.errors import ConflictError, InvalidInputError, NotFoundError
from photoshelf.models.asset import Asset, AssetType
from photoshelf.repositories.asset_repository import AssetRepository
from photoshelf.schemas.asset import (
    AssetCreateRequest,
    AssetResponse,
    AssetSearchFilters,
    AssetStatsResponse,
    AssetUpdateRequest,
)
from photoshelf.services.projection import asset_to_response
from photoshelf.utils.dates import utcnow
from photoshelf.utils.ids import parse_id, parse_ids

logger = logging.getLogger(__name__)

THUMBNAIL_FORMATS = ("WEBP", "JPEG")


def _new_asset(owner_id: str, request: AssetCreateRequest) -> Asset:
    """Build an asset row with default flags, overridden only by explicit request fields."""
    asset = Asset(
        owner_id=owner_id,
        device_asset_id=request.device_asset_id,
        device_id=request.device_id,
        type=request.type,
        original_path=request.original_path,
        original_file_name=request.original_file_name,
        resize_path=request.resize_path,
        webp_path=request.webp_path,
        thumbhash_path=request.thumbhash_path,
        encoded_video_path=request.encoded_video_path,
        duration=request.duration,
        checksum=request.checksum,
        file_created_at=request.file_created_at,
        file_modified_at=request.file_modified_at,
        library_id=request.library_id,
        is_visible=True,
        is_favorite=False,
        is_archived=False,
        is_trashed=False,
    )
    if request.is_visible is not None:
        asset.is_visible = request.is_visible
    if request.is_favorite is not None:
        asset.is_favorite = request.is_favorite
    if request.is_archived is not None:
        asset.is_archived = request.is_archived
    return asset


def _get_owned_or_404(repo: AssetRepository, asset_id: str, caller_id: str) -> Asset:
    asset = repo.get_owned(asset_id, caller_id)
    if not asset:
        # Same answer whether the asset is missing or belongs to someone else
        raise NotFoundError("Asset not found")
    return asset


def list_assets(
    owner_id: str,
    filters: AssetSearchFilters,
    session: Session,
    page: int = 0,
    size: Optional[int] = None,
) -> list[AssetResponse]:
    """List the owner's assets, newest first, paginated by offset = page * size.

    ``size=0`` returns everything.
    """
    owner_id = parse_id(owner_id, "user id")
    if page < 0:
        raise InvalidInputError("page must be >= 0")
    if size is None:
        size = settings.default_page_size
    if size < 0 or size > settings.max_page_size:
        raise InvalidInputError(f"size must be between 0 and {settings.max_page_size}")

    with storage_errors():
        assets = AssetRepository(session).find_by_owner(owner_id, filters, offset=page * size, limit=size)
        return [asset_to_response(a) for a in assets]


def get_asset(asset_id: str, caller_id: str, session: Session) -> AssetResponse:
    asset_id = parse_id(asset_id, "asset id")
    caller_id = parse_id(caller_id, "user id")
    with storage_errors():
        return asset_to_response(_get_owned_or_404(AssetRepository(session), asset_id, caller_id))


def get_thumbnail_path(asset_id: str, caller_id: str, fmt: str, session: Session) -> str:
    """Stored path of the requested rendition, falling back to the original."""
    asset_id = parse_id(asset_id, "asset id")
    caller_id = parse_id(caller_id, "user id")
    fmt = fmt.upper()
    if fmt not in THUMBNAIL_FORMATS:
        raise InvalidInputError(f"Unsupported thumbnail format: {fmt}")

    with storage_errors():
        asset = _get_owned_or_404(AssetRepository(session), asset_id, caller_id)
    if fmt == "WEBP" and asset.webp_path:
        return asset.webp_path
    if fmt == "JPEG" and asset.resize_path:
        return asset.resize_path
    return asset.original_path


def create_asset(owner_id: str, request: AssetCreateRequest, session: Session) -> AssetResponse:
    """Insert one asset. Raises ConflictError if the device key is already taken."""
    owner_id = parse_id(owner_id, "user id")
    repo = AssetRepository(session)

    with transaction(session):
        existing = repo.find_by_device_key(owner_id, request.device_id, request.device_asset_id)
        if existing:
            raise ConflictError("Asset already exists")
        asset = repo.insert(_new_asset(owner_id, request))

    with storage_errors():
        logger.info("Created asset %s for user %s", asset.id, owner_id)
        return asset_to_response(asset)


def bulk_upload_check(owner_id: str, items: list[AssetCreateRequest], session: Session) -> list[AssetResponse]:
    """Create every item that isn't already stored; duplicates are skipped silently.

    All new rows go in with one insert-or-ignore, so the batch lands entirely or not
    at all, and rows a concurrent upload stored first are skipped too.
    """
    owner_id = parse_id(owner_id, "user id")
    repo = AssetRepository(session)

    with transaction(session):
        # One lookup per device rather than one per item
        by_device: dict[str, list[str]] = {}
        for item in items:
            by_device.setdefault(item.device_id, []).append(item.device_asset_id)
        taken: set[tuple[str, str]] = set()
        for device_id, device_asset_ids in by_device.items():
            for found in repo.existing_device_asset_ids(owner_id, device_id, device_asset_ids):
                taken.add((device_id, found))

        candidates = []
        for item in items:
            key = (item.device_id, item.device_asset_id)
            if key in taken:
                logger.debug("Skipping duplicate asset %s/%s", *key)
                continue
            taken.add(key)  # repeats within the batch count as duplicates too
            candidates.append(_new_asset(owner_id, item))

        new_assets = repo.insert_new(candidates)

    logger.info("Bulk upload check: %d of %d assets created for user %s", len(new_assets), len(items), owner_id)
    with storage_errors():
        return [asset_to_response(a) for a in new_assets]


def check_existing(owner_id: str, device_asset_ids: list[str], device_id: str, session: Session) -> dict[str, bool]:
    """Presence flag for every requested device asset id (missing ids map to False)."""
    owner_id = parse_id(owner_id, "user id")
    with storage_errors():
        found = AssetRepository(session).existing_device_asset_ids(owner_id, device_id, device_asset_ids)
    return {d: d in found for d in device_asset_ids}


def update_asset(asset_id: str, caller_id: str, request: AssetUpdateRequest, session: Session) -> AssetResponse:
    """Update favorite/archived flags and descriptive metadata."""
    asset_id = parse_id(asset_id, "asset id")
    caller_id = parse_id(caller_id, "user id")
    repo = AssetRepository(session)

    with transaction(session):
        asset = _get_owned_or_404(repo, asset_id, caller_id)
        if request.is_favorite is not None:
            asset.is_favorite = request.is_favorite
        if request.is_archived is not None:
            asset.is_archived = request.is_archived
        if request.description is not None:
            asset.description = request.description
        if request.file_created_at is not None:
            asset.file_created_at = request.file_created_at
        if request.latitude is not None:
            asset.latitude = request.latitude
        if request.longitude is not None:
            asset.longitude = request.longitude
        repo.touch(asset)

    with storage_errors():
        return asset_to_response(asset)


def trash_assets(owner_id: str, asset_ids: list[str], session: Session) -> int:
    """Move owned assets to the trash. Ids the caller doesn't own are ignored."""
    owner_id = parse_id(owner_id, "user id")
    ids = parse_ids(asset_ids, "asset id")
    with transaction(session):
        count = AssetRepository(session).set_trashed(owner_id, ids, True)
    logger.info("Trashed %d of %d assets for user %s", count, len(ids), owner_id)
    return count


def restore_assets(owner_id: str, asset_ids: list[str], session: Session) -> int:
    """Take owned assets out of the trash. Ids the caller doesn't own are ignored."""
    owner_id = parse_id(owner_id, "user id")
    ids = parse_ids(asset_ids, "asset id")
    with transaction(session):
        count = AssetRepository(session).set_trashed(owner_id, ids, False)
    logger.info("Restored %d of %d assets for user %s", count, len(ids), owner_id)
    return count


def restore_all(owner_id: str, session: Session) -> int:
    owner_id = parse_id(owner_id, "user id")
    repo = AssetRepository(session)
    with transaction(session):
        count = repo.set_trashed(owner_id, repo.trashed_ids(owner_id), False)
    logger.info("Restored all %d trashed assets for user %s", count, owner_id)
    return count


def empty_trash(owner_id: str, session: Session) -> int:
    """Permanently delete every trashed asset of the owner, album memberships included."""
    owner_id = parse_id(owner_id, "user id")
    repo = AssetRepository(session)
    with transaction(session):
        count = repo.delete_many(repo.trashed_ids(owner_id))
    logger.info("Emptied trash: %d assets deleted for user %s", count, owner_id)
    return count


def delete_asset(asset_id: str, caller_id: str, session: Session) -> None:
    """Hard delete: album memberships and the asset row go in one transaction."""
    asset_id = parse_id(asset_id, "asset id")
    caller_id = parse_id(caller_id, "user id")
    repo = AssetRepository(session)
    with transaction(session):
        _get_owned_or_404(repo, asset_id, caller_id)
        repo.delete_many([asset_id])
    logger.info("Deleted asset %s for user %s", asset_id, caller_id)


def get_statistics(owner_id: str, session: Session) -> AssetStatsResponse:
    """Counts of non-trashed images and videos."""
    owner_id = parse_id(owner_id, "user id")
    with storage_errors():
        counts = AssetRepository(session).count_by_type(owner_id)
    images = counts.get(AssetType.IMAGE, 0)
    videos = counts.get(AssetType.VIDEO, 0)
    return AssetStatsResponse(images=images, videos=videos, total=images + videos)


def get_memory_lane(owner_id: str, day: int, month: int, session: Session) -> list[AssetResponse]:
    """Assets captured on this day/month in earlier years, newest first."""
    owner_id = parse_id(owner_id, "user id")
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise InvalidInputError("Invalid day or month")

    with storage_errors():
        assets = AssetRepository(session).find_on_this_day(
            owner_id, day, month, before_year=utcnow().year, limit=settings.memory_lane_limit,
        )
        return [asset_to_response(a) for a in assets]
