from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VideoRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str = "Untitled"
    user_id: Optional[str] = None

    mux_upload_id: str
    mux_asset_id: Optional[str] = None
    mux_status: str = Field(default="waiting")  # waiting | preparing | ready | errored
    mux_playback_id: Optional[str] = None
    duration: int = Field(default=0, ge=0)  # milliseconds

    thumbnail_key: Optional[str] = None
    thumbnail_url: Optional[str] = None
    preview_key: Optional[str] = None
    preview_url: Optional[str] = None

    mux_track_id: Optional[str] = None
    mux_track_status: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CreateUploadRequest(BaseModel):
    title: str = "Untitled"
    user_id: Optional[str] = None


class CreateUploadResponse(BaseModel):
    id: str
    upload_url: str
