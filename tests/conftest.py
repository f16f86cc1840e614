from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from main import app
from src.core.config import Settings, get_settings
from src.database.repository import get_video_repository
from src.database.schemas.video import VideoRecord
from src.services.asset_mirror import get_asset_mirror
from support.fakes import WEBHOOK_SECRET, FakeAssetMirror, InMemoryVideoRepository


@pytest.fixture
def test_settings() -> Settings:
    test_settings = Settings()
    test_settings.MUX_WEBHOOK_SECRET = WEBHOOK_SECRET
    test_settings.MUX_WEBHOOK_TOLERANCE_SECONDS = 300
    test_settings.MUX_IMAGE_BASE_URL = "https://image.mux.com"
    test_settings.MUX_TOKEN_ID = "token-id"
    test_settings.MUX_TOKEN_SECRET = "token-secret"
    test_settings.UPLOAD_CORS_ORIGIN = "*"
    return test_settings


@pytest.fixture
def existing_video() -> VideoRecord:
    return VideoRecord(_id="vid_1", title="Holiday", mux_upload_id="up_1")


@pytest.fixture
def repository(existing_video: VideoRecord) -> InMemoryVideoRepository:
    return InMemoryVideoRepository([existing_video])


@pytest.fixture
def mirror() -> FakeAssetMirror:
    return FakeAssetMirror()


@pytest.fixture
def client(
    test_settings: Settings,
    repository: InMemoryVideoRepository,
    mirror: FakeAssetMirror,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_video_repository] = lambda: repository
    app.dependency_overrides[get_asset_mirror] = lambda: mirror
    try:
        # no context manager: startup would try to reach MongoDB
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
