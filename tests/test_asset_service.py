"""Asset store: duplicate detection, listing filters, trash lifecycle, hard delete."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from conftest import asset_request
from photoshelf.config import settings
from photoshelf.errors import ConflictError, InvalidInputError, NotFoundError
from photoshelf.models.album import AlbumAsset
from photoshelf.models.asset import Asset, AssetType
from photoshelf.repositories.asset_repository import AssetRepository
from photoshelf.schemas.album import AlbumCreateRequest
from photoshelf.schemas.asset import AssetSearchFilters, AssetUpdateRequest
from photoshelf.services import album_service, asset_service
from photoshelf.utils.dates import utcnow


def _count_assets(session) -> int:
    return len(session.exec(select(Asset)).all())


# --- create / duplicates ---

def test_create_asset_applies_default_flags(session, make_user):
    alice = make_user("alice")
    asset = asset_service.create_asset(alice.id, asset_request("a-1"), session)

    assert asset.owner_id == alice.id
    assert asset.is_visible is True
    assert asset.is_favorite is False
    assert asset.is_archived is False
    assert asset.is_trashed is False


def test_create_asset_explicit_flags_override_defaults(session, make_user):
    alice = make_user("alice")
    asset = asset_service.create_asset(
        alice.id, asset_request("a-1", is_favorite=True, is_archived=True, is_visible=False), session,
    )
    assert asset.is_favorite is True
    assert asset.is_archived is True
    assert asset.is_visible is False


def test_duplicate_device_asset_is_conflict(session, make_user):
    alice = make_user("alice")
    asset_service.create_asset(alice.id, asset_request("dup", device_id="phone"), session)

    with pytest.raises(ConflictError):
        asset_service.create_asset(alice.id, asset_request("dup", device_id="phone"), session)
    assert _count_assets(session) == 1


def test_same_device_asset_for_other_owner_is_allowed(session, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    asset_service.create_asset(alice.id, asset_request("same", device_id="phone"), session)
    asset_service.create_asset(bob.id, asset_request("same", device_id="phone"), session)
    assert _count_assets(session) == 2


def test_bulk_upload_check_skips_duplicates(session, make_user):
    alice = make_user("alice")
    asset_service.create_asset(alice.id, asset_request("item-2"), session)

    created = asset_service.bulk_upload_check(
        alice.id,
        [asset_request("item-1"), asset_request("item-2"), asset_request("item-3")],
        session,
    )

    assert sorted(a.device_asset_id for a in created) == ["item-1", "item-3"]
    assert _count_assets(session) == 3


def test_bulk_upload_check_collapses_repeats_within_batch(session, make_user):
    alice = make_user("alice")
    created = asset_service.bulk_upload_check(
        alice.id, [asset_request("x"), asset_request("x")], session,
    )
    assert len(created) == 1


def test_check_existing_reports_every_requested_id(session, make_user):
    alice = make_user("alice")
    asset_service.create_asset(alice.id, asset_request("here", device_id="phone"), session)

    result = asset_service.check_existing(alice.id, ["here", "missing"], "phone", session)
    assert result == {"here": True, "missing": False}

    other_device = asset_service.check_existing(alice.id, ["here"], "tablet", session)
    assert other_device == {"here": False}


# --- reads ---

def test_get_asset_hides_other_users_assets(session, make_user, make_asset):
    alice, carol = make_user("alice"), make_user("carol")
    a3 = make_asset(alice)

    assert asset_service.get_asset(a3.id, alice.id, session).id == a3.id
    with pytest.raises(NotFoundError):
        asset_service.get_asset(a3.id, carol.id, session)


def test_malformed_id_is_invalid_input(session, make_user):
    alice = make_user("alice")
    with pytest.raises(InvalidInputError):
        asset_service.get_asset("not-a-uuid", alice.id, session)


def test_list_assets_is_scoped_to_owner_and_newest_first(session, make_user, make_asset):
    alice, bob = make_user("alice"), make_user("bob")
    first, second = make_asset(alice), make_asset(alice)
    make_asset(bob)

    older = session.get(Asset, first.id)
    older.created_at = utcnow() - timedelta(days=3)
    session.add(older)
    session.commit()

    listed = asset_service.list_assets(alice.id, AssetSearchFilters(), session)
    assert [a.id for a in listed] == [second.id, first.id]


def test_list_assets_false_filter_differs_from_no_filter(session, make_user, make_asset):
    alice = make_user("alice")
    fav = make_asset(alice, is_favorite=True)
    plain = make_asset(alice)

    unfiltered = asset_service.list_assets(alice.id, AssetSearchFilters(), session)
    not_fav = asset_service.list_assets(alice.id, AssetSearchFilters(is_favorite=False), session)
    only_fav = asset_service.list_assets(alice.id, AssetSearchFilters(is_favorite=True), session)

    assert {a.id for a in unfiltered} == {fav.id, plain.id}
    assert [a.id for a in not_fav] == [plain.id]
    assert [a.id for a in only_fav] == [fav.id]


def test_list_assets_filters_type_dates_and_path(session, make_user, make_asset):
    alice = make_user("alice")
    video = make_asset(alice, device_asset_id="clip", type=AssetType.VIDEO, file_created_at=datetime(2021, 7, 1))
    photo = make_asset(alice, device_asset_id="beach", file_created_at=datetime(2019, 1, 5))

    videos = asset_service.list_assets(alice.id, AssetSearchFilters(type=AssetType.VIDEO), session)
    assert [a.id for a in videos] == [video.id]

    recent = asset_service.list_assets(alice.id, AssetSearchFilters(taken_after=datetime(2020, 1, 1)), session)
    assert [a.id for a in recent] == [video.id]

    old = asset_service.list_assets(alice.id, AssetSearchFilters(taken_before=datetime(2020, 1, 1)), session)
    assert [a.id for a in old] == [photo.id]

    by_path = asset_service.list_assets(alice.id, AssetSearchFilters(original_path="beach"), session)
    assert [a.id for a in by_path] == [photo.id]


def test_list_assets_paginates_by_offset(session, make_user, make_asset):
    alice = make_user("alice")
    for _ in range(5):
        make_asset(alice)

    page0 = asset_service.list_assets(alice.id, AssetSearchFilters(), session, page=0, size=2)
    page1 = asset_service.list_assets(alice.id, AssetSearchFilters(), session, page=1, size=2)
    page2 = asset_service.list_assets(alice.id, AssetSearchFilters(), session, page=2, size=2)

    assert len(page0) == 2 and len(page1) == 2 and len(page2) == 1
    assert not {a.id for a in page0} & {a.id for a in page1}


# --- update ---

def test_update_asset_changes_flags_and_metadata(session, make_user, make_asset):
    alice = make_user("alice")
    asset = make_asset(alice)

    updated = asset_service.update_asset(
        asset.id, alice.id,
        AssetUpdateRequest(is_favorite=True, description="sunset", latitude=46.0, longitude=8.9),
        session,
    )

    assert updated.is_favorite is True
    assert updated.is_archived is False
    assert updated.description == "sunset"
    assert updated.latitude == 46.0


def test_update_asset_by_non_owner_is_not_found(session, make_user, make_asset):
    alice, bob = make_user("alice"), make_user("bob")
    asset = make_asset(alice)
    with pytest.raises(NotFoundError):
        asset_service.update_asset(asset.id, bob.id, AssetUpdateRequest(is_favorite=True), session)


# --- trash lifecycle ---

def test_trash_then_restore_leaves_other_flags_untouched(session, make_user, make_asset):
    alice = make_user("alice")
    a = make_asset(alice, is_favorite=True)
    b = make_asset(alice, is_archived=True)

    assert asset_service.trash_assets(alice.id, [a.id, b.id], session) == 2
    trashed = asset_service.get_asset(a.id, alice.id, session)
    assert trashed.is_trashed is True
    assert trashed.trashed_at is not None

    assert asset_service.restore_assets(alice.id, [a.id, b.id], session) == 2
    restored_a = asset_service.get_asset(a.id, alice.id, session)
    restored_b = asset_service.get_asset(b.id, alice.id, session)
    assert (restored_a.is_trashed, restored_a.is_favorite, restored_a.is_archived) == (False, True, False)
    assert (restored_b.is_trashed, restored_b.is_favorite, restored_b.is_archived) == (False, False, True)
    assert restored_a.trashed_at is None


def test_trash_ignores_assets_of_other_owners(session, make_user, make_asset):
    alice, bob = make_user("alice"), make_user("bob")
    mine, theirs = make_asset(alice), make_asset(bob)

    assert asset_service.trash_assets(alice.id, [mine.id, theirs.id], session) == 1
    assert asset_service.get_asset(theirs.id, bob.id, session).is_trashed is False


def test_trashed_asset_stays_in_album(session, make_user, make_asset):
    alice = make_user("alice")
    asset = make_asset(alice)
    album = album_service.create_album(alice.id, AlbumCreateRequest(name="Keep", asset_ids=[asset.id]), session)

    asset_service.trash_assets(alice.id, [asset.id], session)

    assert album_service.get_album(album.id, alice.id, session).asset_count == 1


def test_restore_all_and_empty_trash(session, make_user, make_asset):
    alice = make_user("alice")
    a, b, keep = make_asset(alice), make_asset(alice), make_asset(alice)

    asset_service.trash_assets(alice.id, [a.id, b.id], session)
    assert asset_service.restore_all(alice.id, session) == 2

    asset_service.trash_assets(alice.id, [a.id], session)
    assert asset_service.empty_trash(alice.id, session) == 1

    remaining = {x.id for x in asset_service.list_assets(alice.id, AssetSearchFilters(), session)}
    assert remaining == {b.id, keep.id}


# --- hard delete ---

def test_delete_asset_removes_album_memberships(session, make_user, make_asset):
    alice = make_user("alice")
    asset, other = make_asset(alice), make_asset(alice)
    album = album_service.create_album(
        alice.id, AlbumCreateRequest(name="Trip", asset_ids=[asset.id, other.id]), session,
    )

    asset_service.delete_asset(asset.id, alice.id, session)

    assert session.get(Asset, asset.id) is None
    rows = session.exec(select(AlbumAsset).where(AlbumAsset.asset_id == asset.id)).all()
    assert rows == []
    assert album_service.get_album(album.id, alice.id, session).asset_count == 1


def test_delete_asset_detaches_stack_children(session, make_user, make_asset):
    alice = make_user("alice")
    parent, child = make_asset(alice), make_asset(alice)
    row = session.get(Asset, child.id)
    row.stack_parent_id = parent.id
    session.add(row)
    session.commit()

    asset_service.delete_asset(parent.id, alice.id, session)

    assert asset_service.get_asset(child.id, alice.id, session).stack_parent_id is None


def test_delete_asset_by_non_owner_is_not_found(session, make_user, make_asset):
    alice, bob = make_user("alice"), make_user("bob")
    asset = make_asset(alice)
    with pytest.raises(NotFoundError):
        asset_service.delete_asset(asset.id, bob.id, session)
    assert session.get(Asset, asset.id) is not None


# --- statistics / memory lane / thumbnails ---

def test_statistics_counts_non_trashed_by_type(session, make_user, make_asset):
    alice = make_user("alice")
    make_asset(alice)
    gone = make_asset(alice)
    make_asset(alice, type=AssetType.VIDEO)
    asset_service.trash_assets(alice.id, [gone.id], session)

    stats = asset_service.get_statistics(alice.id, session)
    assert (stats.images, stats.videos, stats.total) == (1, 1, 2)


def test_memory_lane_matches_day_in_prior_years(session, make_user, make_asset):
    alice = make_user("alice")
    this_year = utcnow().year
    two_years = make_asset(alice, file_created_at=datetime(this_year - 2, 6, 15, 9, 30))
    five_years = make_asset(alice, file_created_at=datetime(this_year - 5, 6, 15, 18, 0))
    make_asset(alice, file_created_at=datetime(this_year, 6, 15, 9, 0))  # current year
    make_asset(alice, file_created_at=datetime(this_year - 1, 6, 16, 9, 0))  # wrong day
    archived = make_asset(alice, file_created_at=datetime(this_year - 3, 6, 15), is_archived=True)
    trashed = make_asset(alice, file_created_at=datetime(this_year - 4, 6, 15))
    asset_service.trash_assets(alice.id, [trashed.id], session)

    lane = asset_service.get_memory_lane(alice.id, 15, 6, session)

    assert [a.id for a in lane] == [two_years.id, five_years.id]
    assert archived.id not in {a.id for a in lane}


def test_memory_lane_rejects_bad_dates(session, make_user):
    alice = make_user("alice")
    with pytest.raises(InvalidInputError):
        asset_service.get_memory_lane(alice.id, 1, 13, session)


def test_thumbnail_path_falls_back_to_original(session, make_user, make_asset):
    alice = make_user("alice")
    asset = make_asset(alice, webp_path="/thumbs/a.webp")

    assert asset_service.get_thumbnail_path(asset.id, alice.id, "WEBP", session) == "/thumbs/a.webp"
    assert asset_service.get_thumbnail_path(asset.id, alice.id, "jpeg", session) == asset.original_path
    with pytest.raises(InvalidInputError):
        asset_service.get_thumbnail_path(asset.id, alice.id, "GIF", session)


def test_memory_lane_is_capped(session, make_user, make_asset):
    alice = make_user("alice")
    this_year = utcnow().year
    for i in range(25):
        make_asset(alice, file_created_at=datetime(this_year - 1 - i % 5, 3, 8, i % 24, 0))

    lane = asset_service.get_memory_lane(alice.id, 8, 3, session)

    assert len(lane) == settings.memory_lane_limit == 20
    years = [a.file_created_at.year for a in lane]
    assert years == sorted(years, reverse=True)


def test_memory_lane_falls_back_to_upload_time(session, make_user, make_asset):
    alice = make_user("alice")
    undated = make_asset(alice)
    row = session.get(Asset, undated.id)
    row.created_at = datetime(utcnow().year - 3, 11, 2, 8, 0, tzinfo=timezone.utc)
    session.add(row)
    session.commit()

    lane = asset_service.get_memory_lane(alice.id, 2, 11, session)

    assert [a.id for a in lane] == [undated.id]


# --- timezones ---

def test_capture_time_is_stored_as_aware_utc(session, make_user):
    alice = make_user("alice")
    local = datetime(2023, 8, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    created = asset_service.create_asset(alice.id, asset_request("tz", file_created_at=local), session)

    stored = asset_service.get_asset(created.id, alice.id, session)
    assert stored.file_created_at == datetime(2023, 8, 1, 10, 0, tzinfo=timezone.utc)
    assert stored.file_created_at.utcoffset() == timedelta(0)
    assert stored.created_at.tzinfo is not None


def test_date_filters_accept_aware_bounds(session, make_user, make_asset):
    alice = make_user("alice")
    inside = make_asset(alice, file_created_at=datetime(2023, 8, 1, 10, 0, tzinfo=timezone.utc))
    make_asset(alice, file_created_at=datetime(2019, 1, 1, tzinfo=timezone.utc))

    bounds = AssetSearchFilters(
        taken_after=datetime(2023, 8, 1, 11, 0, tzinfo=timezone(timedelta(hours=2))),
        taken_before=datetime(2023, 8, 2, tzinfo=timezone.utc),
    )
    assert [a.id for a in asset_service.list_assets(alice.id, bounds, session)] == [inside.id]


# --- bulk upload under concurrency ---

def test_bulk_upload_check_skips_rows_stored_after_the_duplicate_read(session, make_user, monkeypatch):
    alice = make_user("alice")
    asset_service.create_asset(alice.id, asset_request("raced"), session)
    # Another upload stored "raced" between this batch's read and its insert
    monkeypatch.setattr(AssetRepository, "existing_device_asset_ids", lambda self, *args: set())

    created = asset_service.bulk_upload_check(
        alice.id, [asset_request("raced"), asset_request("fresh")], session,
    )

    assert [a.device_asset_id for a in created] == ["fresh"]
    assert _count_assets(session) == 2
