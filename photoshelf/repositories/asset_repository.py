"""Asset persistence: every query against the assets table lives here."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, extract, update
from sqlmodel import Session, col, func, select

from photoshelf.models.album import AlbumAsset
from photoshelf.models.asset import Asset, AssetType
from photoshelf.repositories._insert import insert_ignoring_duplicates
from photoshelf.schemas.asset import AssetSearchFilters
from photoshelf.utils.dates import utcnow


def _taken_at():
    """Capture time, falling back to upload time."""
    return func.coalesce(Asset.file_created_at, Asset.created_at)


class AssetRepository:
    def __init__(self, session: Session):
        self.session = session

    def _bulk(self, stmt):
        # Always followed by a commit, which expires every loaded object
        return self.session.exec(stmt, execution_options={"synchronize_session": False})

    # --- Reads ---

    def get_owned(self, asset_id: str, owner_id: str) -> Optional[Asset]:
        return self.session.exec(
            select(Asset).where(Asset.id == asset_id, Asset.owner_id == owner_id)
        ).first()

    def find_by_owner(
        self,
        owner_id: str,
        filters: AssetSearchFilters,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[Asset]:
        query = select(Asset).where(Asset.owner_id == owner_id)

        if filters.type is not None:
            query = query.where(Asset.type == filters.type)
        if filters.is_favorite is not None:
            query = query.where(Asset.is_favorite == filters.is_favorite)
        if filters.is_archived is not None:
            query = query.where(Asset.is_archived == filters.is_archived)
        if filters.is_trashed is not None:
            query = query.where(Asset.is_trashed == filters.is_trashed)
        if filters.library_id is not None:
            query = query.where(Asset.library_id == filters.library_id)
        if filters.taken_after is not None:
            query = query.where(col(Asset.file_created_at) >= filters.taken_after)
        if filters.taken_before is not None:
            query = query.where(col(Asset.file_created_at) <= filters.taken_before)
        if filters.original_path:
            query = query.where(col(Asset.original_path).contains(filters.original_path, autoescape=True))

        query = query.order_by(col(Asset.created_at).desc(), col(Asset.id).desc())
        if limit:
            query = query.offset(offset).limit(limit)
        return list(self.session.exec(query).all())

    def find_by_device_key(self, owner_id: str, device_id: str, device_asset_id: str) -> Optional[Asset]:
        return self.session.exec(
            select(Asset).where(
                Asset.owner_id == owner_id,
                Asset.device_id == device_id,
                Asset.device_asset_id == device_asset_id,
            )
        ).first()

    def existing_device_asset_ids(self, owner_id: str, device_id: str, device_asset_ids: list[str]) -> set[str]:
        if not device_asset_ids:
            return set()
        rows = self.session.exec(
            select(Asset.device_asset_id).where(
                Asset.owner_id == owner_id,
                Asset.device_id == device_id,
                col(Asset.device_asset_id).in_(device_asset_ids),
            )
        ).all()
        return set(rows)

    def existing_ids(self, asset_ids: list[str]) -> set[str]:
        """Ids that exist regardless of owner."""
        if not asset_ids:
            return set()
        return set(self.session.exec(select(Asset.id).where(col(Asset.id).in_(asset_ids))).all())

    def trashed_ids(self, owner_id: str) -> list[str]:
        return list(self.session.exec(
            select(Asset.id).where(Asset.owner_id == owner_id, Asset.is_trashed == True)  # noqa: E712
        ).all())

    def count_by_type(self, owner_id: str) -> dict[AssetType, int]:
        rows = self.session.exec(
            select(Asset.type, func.count())
            .where(Asset.owner_id == owner_id, Asset.is_trashed == False)  # noqa: E712
            .group_by(Asset.type)
        ).all()
        return {AssetType(t): n for t, n in rows}

    def find_on_this_day(self, owner_id: str, day: int, month: int, before_year: int, limit: int) -> list[Asset]:
        taken = _taken_at()
        query = (
            select(Asset)
            .where(
                Asset.owner_id == owner_id,
                Asset.is_trashed == False,  # noqa: E712
                Asset.is_archived == False,  # noqa: E712
                extract("month", taken) == month,
                extract("day", taken) == day,
                extract("year", taken) < before_year,
            )
            .order_by(taken.desc())
            .limit(limit)
        )
        return list(self.session.exec(query).all())

    # --- Writes ---

    def insert(self, asset: Asset) -> Asset:
        self.session.add(asset)
        self.session.flush()
        return asset

    def insert_new(self, assets: list[Asset]) -> list[Asset]:
        """Insert assets whose device key is not stored yet; returns only the rows that went in.

        Rows whose device key is already stored are dropped by the unique constraint.
        """
        if not assets:
            return []
        insert_ignoring_duplicates(
            self.session,
            Asset.__table__,
            [a.model_dump() for a in assets],
            ["owner_id", "device_id", "device_asset_id"],
        )
        ids = [a.id for a in assets]
        stored = {a.id: a for a in self.session.exec(select(Asset).where(col(Asset.id).in_(ids))).all()}
        return [stored[i] for i in ids if i in stored]

    def set_trashed(self, owner_id: str, asset_ids: list[str], trashed: bool) -> int:
        """Flip the trash flag on owned assets whose flag differs. Returns rows changed."""
        if not asset_ids:
            return 0
        now = utcnow()
        result = self._bulk(
            update(Asset)
            .where(
                col(Asset.id).in_(asset_ids),
                Asset.owner_id == owner_id,
                Asset.is_trashed == (not trashed),
            )
            .values(is_trashed=trashed, trashed_at=now if trashed else None, updated_at=now)
        )
        return result.rowcount

    def delete_many(self, asset_ids: list[str]) -> int:
        """Hard delete assets together with their album memberships.

        Must run inside a transaction; the caller owns commit/rollback.
        """
        if not asset_ids:
            return 0
        self._bulk(delete(AlbumAsset).where(col(AlbumAsset.asset_id).in_(asset_ids)))
        # Stack children keep living on their own
        self._bulk(
            update(Asset)
            .where(col(Asset.stack_parent_id).in_(asset_ids))
            .values(stack_parent_id=None, updated_at=utcnow())
        )
        result = self._bulk(delete(Asset).where(col(Asset.id).in_(asset_ids)))
        return result.rowcount

    def touch(self, asset: Asset, when: Optional[datetime] = None) -> None:
        asset.updated_at = when or utcnow()
        self.session.add(asset)
