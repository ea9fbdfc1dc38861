"""Album persistence: albums plus the album_assets and album_shared_users join tables."""

from typing import Optional

from sqlalchemy import delete, exists, or_
from sqlmodel import Session, col, func, select

from photoshelf.models.album import Album, AlbumAsset, AlbumSharedUser, AlbumUserRole
from photoshelf.models.asset import Asset
from photoshelf.models.user import User
from photoshelf.repositories._insert import insert_ignoring_duplicates
from photoshelf.utils.dates import utcnow


class AlbumRepository:
    def __init__(self, session: Session):
        self.session = session

    def _bulk(self, stmt):
        # Always followed by a commit, which expires every loaded object
        return self.session.exec(stmt, execution_options={"synchronize_session": False})

    # --- Albums ---

    def get(self, album_id: str) -> Optional[Album]:
        return self.session.get(Album, album_id)

    def is_shared_user(self, album_id: str, user_id: str) -> bool:
        row = self.session.exec(
            select(AlbumSharedUser.id).where(
                AlbumSharedUser.album_id == album_id,
                AlbumSharedUser.user_id == user_id,
            )
        ).first()
        return row is not None

    def list_owned(self, user_id: str) -> list[Album]:
        return list(self.session.exec(
            select(Album).where(Album.owner_id == user_id).order_by(col(Album.created_at).desc())
        ).all())

    def list_shared_with(self, user_id: str) -> list[Album]:
        return list(self.session.exec(
            select(Album)
            .join(AlbumSharedUser, col(AlbumSharedUser.album_id) == col(Album.id))
            .where(AlbumSharedUser.user_id == user_id, Album.owner_id != user_id)
            .order_by(col(Album.created_at).desc())
        ).all())

    def list_accessible(self, user_id: str) -> list[Album]:
        """Owned or shared albums; each album appears once."""
        shared_ids = select(AlbumSharedUser.album_id).where(AlbumSharedUser.user_id == user_id)
        return list(self.session.exec(
            select(Album)
            .where(or_(Album.owner_id == user_id, col(Album.id).in_(shared_ids)))
            .order_by(col(Album.created_at).desc())
        ).all())

    def insert(self, album: Album) -> Album:
        self.session.add(album)
        self.session.flush()
        return album

    def delete_album(self, album_id: str) -> None:
        """Remove both join tables' rows, then the album row. Caller owns the transaction."""
        self._bulk(delete(AlbumAsset).where(AlbumAsset.album_id == album_id))
        self._bulk(delete(AlbumSharedUser).where(AlbumSharedUser.album_id == album_id))
        self._bulk(delete(Album).where(Album.id == album_id))

    def statistics(self, user_id: str) -> dict[str, int]:
        has_shares = exists().where(AlbumSharedUser.album_id == Album.id)
        owned = self.session.exec(
            select(func.count()).select_from(Album).where(Album.owner_id == user_id)
        ).one()
        not_shared = self.session.exec(
            select(func.count()).select_from(Album).where(Album.owner_id == user_id, ~has_shares)
        ).one()
        shared = self.session.exec(
            select(func.count())
            .select_from(AlbumSharedUser)
            .join(Album, col(Album.id) == col(AlbumSharedUser.album_id))
            .where(AlbumSharedUser.user_id == user_id, Album.owner_id != user_id)
        ).one()
        return {"owned": owned, "shared": shared, "not_shared": not_shared}

    # --- Members (album_assets) ---

    def get_assets(self, album_id: str) -> list[Asset]:
        """Member assets in the order they were added."""
        return list(self.session.exec(
            select(Asset)
            .join(AlbumAsset, col(AlbumAsset.asset_id) == col(Asset.id))
            .where(AlbumAsset.album_id == album_id)
            .order_by(col(AlbumAsset.id))
        ).all())

    def member_asset_ids(self, album_id: str, asset_ids: list[str]) -> set[str]:
        if not asset_ids:
            return set()
        return set(self.session.exec(
            select(AlbumAsset.asset_id).where(
                AlbumAsset.album_id == album_id,
                col(AlbumAsset.asset_id).in_(asset_ids),
            )
        ).all())

    def insert_album_asset_rows(self, album_id: str, asset_ids: list[str]) -> None:
        now = utcnow()
        insert_ignoring_duplicates(
            self.session,
            AlbumAsset.__table__,
            [{"album_id": album_id, "asset_id": a, "added_at": now} for a in asset_ids],
            ["album_id", "asset_id"],
        )

    def delete_album_asset_rows(self, album_id: str, asset_ids: list[str]) -> int:
        if not asset_ids:
            return 0
        result = self._bulk(
            delete(AlbumAsset).where(
                AlbumAsset.album_id == album_id,
                col(AlbumAsset.asset_id).in_(asset_ids),
            )
        )
        return result.rowcount

    # --- Shared users (album_shared_users) ---

    def get_shared_users(self, album_id: str) -> list[tuple[User, AlbumUserRole]]:
        """Shared users with their roles, in the order they were added."""
        return list(self.session.exec(
            select(User, AlbumSharedUser.role)
            .join(AlbumSharedUser, col(AlbumSharedUser.user_id) == col(User.id))
            .where(AlbumSharedUser.album_id == album_id)
            .order_by(col(AlbumSharedUser.id))
        ).all())

    def existing_user_ids(self, user_ids: list[str]) -> set[str]:
        if not user_ids:
            return set()
        return set(self.session.exec(select(User.id).where(col(User.id).in_(user_ids))).all())

    def insert_shared_user_rows(
        self,
        album_id: str,
        user_ids: list[str],
        role: AlbumUserRole = AlbumUserRole.EDITOR,
    ) -> None:
        """Grant access; sharing again with someone already present only updates the role."""
        now = utcnow()
        insert_ignoring_duplicates(
            self.session,
            AlbumSharedUser.__table__,
            [{"album_id": album_id, "user_id": u, "role": role, "added_at": now} for u in user_ids],
            ["album_id", "user_id"],
            update_columns=["role"],
        )

    def delete_shared_user_row(self, album_id: str, user_id: str) -> int:
        result = self._bulk(
            delete(AlbumSharedUser).where(
                AlbumSharedUser.album_id == album_id,
                AlbumSharedUser.user_id == user_id,
            )
        )
        return result.rowcount
