from fastapi import APIRouter, Depends, HTTPException
from uuid import uuid4
import logging

from src.core.config import Settings, get_settings
from src.core.errors import WebhookError
from src.database.repository import VideoRepository, get_video_repository
from src.database.schemas.video import CreateUploadRequest, CreateUploadResponse, VideoRecord
from src.services.mux_client import MuxClient, get_mux_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/uploads", response_model=CreateUploadResponse, status_code=201)
async def create_upload(
    payload: CreateUploadRequest,
    settings: Settings = Depends(get_settings),
    repository: VideoRepository = Depends(get_video_repository),
    mux_client: MuxClient = Depends(get_mux_client),
):
    try:
        upload_id, upload_url = await mux_client.create_upload(settings.UPLOAD_CORS_ORIGIN)
    except WebhookError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    # only the upload reference is known here; webhooks fill in the rest
    record = VideoRecord(
        _id=f"vid_{uuid4().hex}",
        title=payload.title,
        user_id=payload.user_id,
        mux_upload_id=upload_id,
        mux_status="waiting",
    )
    await repository.insert(record)
    logger.info("Created video %s for upload %s", record.id, upload_id)

    return CreateUploadResponse(id=record.id, upload_url=upload_url)


@router.get("/{video_id}", response_model=VideoRecord, response_model_by_alias=False)
async def get_video(
    video_id: str,
    repository: VideoRepository = Depends(get_video_repository),
):
    record = await repository.get(video_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Video not found")
    return record
