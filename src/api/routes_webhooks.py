import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from src.core.config import Settings, get_settings
from src.core.errors import (
    ConfigurationError,
    MalformedPayloadError,
    MissingFieldError,
    UnauthenticatedError,
    InvalidSignatureError,
    UnexpectedError,
    WebhookError,
)
from src.core.guards import require
from src.core.security import verify_mux_signature
from src.database.repository import VideoRepository, get_video_repository
from src.database.schemas.mux_events import MuxEventEnvelope
from src.services.asset_mirror import AssetMirror, get_asset_mirror
from src.services.mux_webhooks import MuxWebhookHandlers

logger = logging.getLogger(__name__)
router = APIRouter()

SIGNATURE_HEADER = "mux-signature"


def get_webhook_handlers(
    settings: Settings = Depends(get_settings),
    repository: VideoRepository = Depends(get_video_repository),
    mirror: AssetMirror = Depends(get_asset_mirror),
) -> MuxWebhookHandlers:
    return MuxWebhookHandlers(repository, mirror, settings)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_envelope(raw_body: bytes) -> MuxEventEnvelope:
    payload = json.loads(raw_body, parse_constant=_reject_constant)
    if not isinstance(payload, dict):
        raise ValueError("webhook body is not a JSON object")
    return MuxEventEnvelope.model_validate(payload)


async def receive_event(request: Request, settings: Settings, handlers: MuxWebhookHandlers) -> None:
    secret = settings.MUX_WEBHOOK_SECRET
    if not secret:
        logger.error("MUX_WEBHOOK_SECRET environment variable is not set")
        raise ConfigurationError()

    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("Webhook received without %s header", SIGNATURE_HEADER)
        raise UnauthenticatedError()

    # the signature covers these exact bytes, so they are never re-serialized
    raw_body = await request.body()
    envelope = require(MalformedPayloadError, "Invalid JSON payload", _parse_envelope, raw_body)

    require(
        InvalidSignatureError,
        "Invalid signature",
        verify_mux_signature,
        raw_body,
        signature,
        secret,
        tolerance=settings.MUX_WEBHOOK_TOLERANCE_SECONDS,
    )

    if not envelope.type:
        logger.error("Webhook missing event type")
        raise MissingFieldError(["type"])

    await handlers.dispatch(envelope.type, envelope.data)


@router.post("/webhook")
async def mux_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    handlers: MuxWebhookHandlers = Depends(get_webhook_handlers),
):
    try:
        await receive_event(request, settings, handlers)
    except WebhookError as exc:
        logger.info("Webhook rejected with %d: %s", exc.status_code, exc.message)
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    except Exception:
        logger.exception("Unhandled error in Mux webhook handler")
        error = UnexpectedError()
        return PlainTextResponse(error.message, status_code=error.status_code)

    return PlainTextResponse("Webhook processed successfully", status_code=200)
