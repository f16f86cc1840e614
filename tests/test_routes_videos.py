import json
from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from src.services.mux_client import MuxClient, get_mux_client
from support.fakes import InMemoryVideoRepository


@pytest.fixture
def mux_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def use_mux(client: TestClient, mux_requests: list[httpx.Request]) -> Iterator[Callable[..., None]]:
    def install(handler: Callable[[httpx.Request], httpx.Response], **kwargs: object) -> None:
        def recording(request: httpx.Request) -> httpx.Response:
            mux_requests.append(request)
            return handler(request)

        options = {"token_id": "token-id", "token_secret": "token-secret", **kwargs}
        mux = MuxClient(transport=httpx.MockTransport(recording), **options)
        app.dependency_overrides[get_mux_client] = lambda: mux

    yield install


def _upload_created(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        201,
        json={"data": {"id": "up_new", "url": "https://storage.googleapis.com/upload/up_new", "status": "waiting"}},
    )


def test_create_upload_stores_waiting_record(
    client: TestClient,
    repository: InMemoryVideoRepository,
    use_mux: Callable[..., None],
    mux_requests: list[httpx.Request],
) -> None:
    use_mux(_upload_created)

    response = client.post("/videos/uploads", json={"title": "Launch day", "user_id": "user_1"})

    assert response.status_code == 201
    body = response.json()
    assert body["upload_url"] == "https://storage.googleapis.com/upload/up_new"
    record = repository.record(body["id"])
    assert record.mux_upload_id == "up_new"
    assert record.mux_status == "waiting"
    assert record.title == "Launch day"
    assert record.mux_asset_id is None

    sent = json.loads(mux_requests[0].content)
    assert mux_requests[0].url.path == "/video/v1/uploads"
    assert mux_requests[0].headers["authorization"].startswith("Basic ")
    assert sent["new_asset_settings"]["playback_policy"] == ["public"]


def test_create_upload_defaults_title(
    client: TestClient, repository: InMemoryVideoRepository, use_mux: Callable[..., None]
) -> None:
    use_mux(_upload_created)

    response = client.post("/videos/uploads", json={})

    assert repository.record(response.json()["id"]).title == "Untitled"


def test_provider_failure_is_bad_gateway(
    client: TestClient, repository: InMemoryVideoRepository, use_mux: Callable[..., None]
) -> None:
    use_mux(lambda request: httpx.Response(500, json={"error": "nope"}))

    response = client.post("/videos/uploads", json={"title": "x"})

    assert response.status_code == 502
    assert list(repository.docs) == ["vid_1"]


def test_missing_credentials_is_server_error(
    client: TestClient, use_mux: Callable[..., None], mux_requests: list[httpx.Request]
) -> None:
    use_mux(_upload_created, token_id=None)

    response = client.post("/videos/uploads", json={"title": "x"})

    assert response.status_code == 500
    assert mux_requests == []


def test_get_video_returns_record(client: TestClient) -> None:
    response = client.get("/videos/vid_1")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "vid_1"
    assert body["mux_upload_id"] == "up_1"
    assert body["duration"] == 0


def test_get_unknown_video_is_not_found(client: TestClient) -> None:
    assert client.get("/videos/vid_missing").status_code == 404
