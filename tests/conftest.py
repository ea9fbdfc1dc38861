"""Shared fixtures: a fresh SQLite database per test, users, assets and an API client."""

import os
import tempfile
import uuid
from datetime import datetime

# Setup environment for testing (before anything imports photoshelf.config)
os.environ["PHOTOSHELF_DATA_DIR"] = tempfile.mkdtemp()
os.environ["PHOTOSHELF_DB_PATH"] = os.path.join(os.environ["PHOTOSHELF_DATA_DIR"], "test.db")
os.environ["PHOTOSHELF_JWT_SECRET"] = "test-secret-do-not-use-in-production"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from photoshelf.database import get_session, init_db, make_engine
from photoshelf.main import app
from photoshelf.models.asset import AssetType
from photoshelf.models.user import User
from photoshelf.schemas.asset import AssetCreateRequest
from photoshelf.services import asset_service
from photoshelf.utils.security import create_access_token


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'photoshelf.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def make_user(session):
    def _make(name: str = "alice") -> User:
        user = User(name=name, email=f"{name}-{uuid.uuid4().hex[:8]}@example.com")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make


def asset_request(
    device_asset_id: str | None = None,
    device_id: str = "pixel-7",
    type: AssetType = AssetType.IMAGE,
    file_created_at: datetime | None = None,
    **extra,
) -> AssetCreateRequest:
    device_asset_id = device_asset_id or uuid.uuid4().hex
    return AssetCreateRequest(
        device_asset_id=device_asset_id,
        device_id=device_id,
        type=type,
        original_path=f"/library/upload/{device_asset_id}.jpg",
        original_file_name=f"IMG_{device_asset_id[:4]}.jpg",
        file_created_at=file_created_at,
        **extra,
    )


@pytest.fixture
def make_asset(session):
    def _make(owner: User, **kwargs):
        return asset_service.create_asset(owner.id, asset_request(**kwargs), session)
    return _make


@pytest.fixture
def client(engine):
    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
