"""PhotoShelf Database Models."""

from photoshelf.models.user import User
from photoshelf.models.asset import Asset, AssetType
from photoshelf.models.album import Album, AlbumAsset, AlbumOrder, AlbumSharedUser, AlbumUserRole

__all__ = [
    "User",
    "Asset",
    "AssetType",
    "Album",
    "AlbumAsset",
    "AlbumOrder",
    "AlbumSharedUser",
    "AlbumUserRole",
]
