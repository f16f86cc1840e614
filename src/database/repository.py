import logging
from typing import Any, Dict, Optional

from src.database.collections import get_videos_collection
from src.database.schemas.video import VideoRecord

logger = logging.getLogger(__name__)

# Fields a record may be addressed by. Each one is unique in the collection.
BY_ID = "_id"
BY_UPLOAD_ID = "mux_upload_id"
BY_ASSET_ID = "mux_asset_id"


class VideoRepository:
    """Single-row reads and writes against the ``videos`` collection."""

    def __init__(self, collection=None):
        self._collection = collection

    @property
    def collection(self):
        if self._collection is None:
            self._collection = get_videos_collection()
        return self._collection

    async def find_one(self, field: str, value: Any) -> Optional[VideoRecord]:
        doc = await self.collection.find_one({field: value})
        if doc is None:
            return None
        return VideoRecord.model_validate(doc)

    async def get(self, video_id: str) -> Optional[VideoRecord]:
        return await self.find_one(BY_ID, video_id)

    async def insert(self, record: VideoRecord) -> None:
        await self.collection.insert_one(record.model_dump(by_alias=True))

    async def update(self, field: str, value: Any, patch: Dict[str, Any]) -> None:
        result = await self.collection.update_one({field: value}, {"$set": patch})
        if result.matched_count == 0:
            logger.warning("No video matched %s=%s during update", field, value)

    async def delete(self, field: str, value: Any) -> None:
        result = await self.collection.delete_one({field: value})
        logger.info("Deleted %d video(s) with %s=%s", result.deleted_count, field, value)


def get_video_repository() -> VideoRepository:
    return VideoRepository()
