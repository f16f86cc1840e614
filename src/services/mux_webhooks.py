import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from src.core.config import Settings
from src.core.errors import NotFoundError
from src.core.guards import attempt
from src.database.repository import BY_ASSET_ID, BY_ID, BY_UPLOAD_ID, VideoRepository
from src.database.schemas.mux_events import (
    ASSET_CREATED,
    ASSET_DELETED,
    ASSET_ERRORED,
    ASSET_READY,
    TRACK_READY,
    AssetCreatedData,
    AssetDeletedData,
    AssetErroredData,
    AssetReadyData,
    TrackReadyData,
    decode_event_data,
)
from src.database.schemas.video import utcnow
from src.services.asset_mirror import AssetMirror

logger = logging.getLogger(__name__)


class MuxWebhookHandlers:
    """
    Applies Mux asset lifecycle events to stored video records.

    Every handler decodes its payload first, so missing fields are reported
    before any lookup, then confirms the record exists before mutating it.
    """

    def __init__(self, repository: VideoRepository, mirror: AssetMirror, settings: Settings):
        self.repository = repository
        self.mirror = mirror
        self.image_base_url = settings.MUX_IMAGE_BASE_URL.rstrip("/")
        self._handlers: Dict[str, Callable[[dict], Awaitable[None]]] = {
            ASSET_CREATED: self.asset_created,
            ASSET_READY: self.asset_ready,
            ASSET_ERRORED: self.asset_errored,
            ASSET_DELETED: self.asset_deleted,
            TRACK_READY: self.track_ready,
        }

    async def dispatch(self, event_type: str, data: dict) -> None:
        handler = self._handlers.get(event_type)
        if handler is None:
            logger.warning("Unhandled webhook event type: %s", event_type)
            return
        await handler(data)

    async def _require_record(self, field: str, value: str):
        record = await self.repository.find_one(field, value)
        if record is None:
            logger.warning("No video found with %s: %s", field, value)
            raise NotFoundError()
        return record

    async def asset_created(self, data: dict) -> None:
        event = decode_event_data(AssetCreatedData, data)
        await self._require_record(BY_UPLOAD_ID, event.upload_id)

        await self.repository.update(BY_UPLOAD_ID, event.upload_id, {
            "mux_asset_id": event.id,
            "mux_status": event.status,
            "updated_at": utcnow(),
        })

    async def asset_ready(self, data: dict) -> None:
        event = decode_event_data(AssetReadyData, data)
        await self._require_record(BY_UPLOAD_ID, event.upload_id)

        playback_id = event.playback_id
        thumbnail, preview = await asyncio.gather(
            attempt(
                f"thumbnail mirror for {playback_id}",
                self.mirror.copy_from_url,
                f"{self.image_base_url}/{playback_id}/thumbnail.jpg",
                f"videos/{playback_id}/thumbnail.jpg",
            ),
            attempt(
                f"preview mirror for {playback_id}",
                self.mirror.copy_from_url,
                f"{self.image_base_url}/{playback_id}/animated.gif",
                f"videos/{playback_id}/preview.gif",
            ),
        )

        # only the assets that were mirrored are written
        patch: Dict[str, Any] = {
            "mux_status": event.status,
            "mux_playback_id": playback_id,
            "mux_asset_id": event.id,
            "duration": event.duration_millis,
            "updated_at": utcnow(),
        }
        if thumbnail is not None:
            patch["thumbnail_key"] = thumbnail.key
            patch["thumbnail_url"] = thumbnail.url
        if preview is not None:
            patch["preview_key"] = preview.key
            patch["preview_url"] = preview.url

        await self.repository.update(BY_UPLOAD_ID, event.upload_id, patch)

    async def asset_errored(self, data: dict) -> None:
        event = decode_event_data(AssetErroredData, data)
        await self._require_record(BY_UPLOAD_ID, event.upload_id)

        await self.repository.update(BY_UPLOAD_ID, event.upload_id, {
            "mux_status": event.status,
            "updated_at": utcnow(),
        })

    async def asset_deleted(self, data: dict) -> None:
        event = decode_event_data(AssetDeletedData, data)

        # Deletion always acknowledges once attempted; replays must not fail.
        try:
            record = await self.repository.find_one(BY_UPLOAD_ID, event.upload_id)
            if record is None:
                logger.warning("No video found with mux_upload_id: %s", event.upload_id)
                await self.repository.delete(BY_UPLOAD_ID, event.upload_id)
                return

            cleanups = [
                attempt(f"delete {label} {key}", self.mirror.delete_by_key, key)
                for label, key in (("thumbnail", record.thumbnail_key), ("preview", record.preview_key))
                if key
            ]
            await asyncio.gather(*cleanups)
            await self.repository.delete(BY_ID, record.id)
        except Exception:
            logger.exception("Error in video.asset.deleted handler for upload %s", event.upload_id)

    async def track_ready(self, data: dict) -> None:
        event = decode_event_data(TrackReadyData, data)
        await self._require_record(BY_ASSET_ID, event.asset_id)

        await self.repository.update(BY_ASSET_ID, event.asset_id, {
            "mux_track_id": event.id,
            "mux_track_status": event.status,
            "updated_at": utcnow(),
        })
