import logging
from typing import Optional, Tuple

import httpx

from src.core.config import Settings, settings
from src.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class MuxClient:
    """Minimal client for the Mux Video API (direct uploads only)."""

    def __init__(
        self,
        token_id: Optional[str],
        token_secret: Optional[str],
        base_url: str = "https://api.mux.com",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_id = token_id
        self.token_secret = token_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "MuxClient":
        return cls(settings.MUX_TOKEN_ID, settings.MUX_TOKEN_SECRET, base_url=settings.MUX_API_BASE_URL)

    async def create_upload(self, cors_origin: str = "*") -> Tuple[str, str]:
        """
        Creates a direct upload and returns ``(upload_id, upload_url)``.

        New assets get a public playback policy and auto-generated English
        captions, which later arrive as ``video.asset.track.ready`` events.
        """
        if not self.token_id or not self.token_secret:
            raise ConfigurationError("Mux API credentials are not set")

        body = {
            "cors_origin": cors_origin,
            "new_asset_settings": {
                "playback_policy": ["public"],
                "inputs": [
                    {"generated_subtitles": [{"language_code": "en", "name": "English"}]},
                ],
            },
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self.token_id, self.token_secret),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post("/video/v1/uploads", json=body)
                response.raise_for_status()
                data = response.json()["data"]
                return data["id"], data["url"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.error("Mux upload creation failed: %s", exc)
            raise UpstreamError() from exc


def get_mux_client() -> MuxClient:
    return MuxClient.from_settings(settings)
