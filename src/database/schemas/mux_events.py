"""Typed views of the Mux webhook envelope, one model per handled event kind."""

from typing import Annotated, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, FiniteFloat, Field, StringConstraints, ValidationError

from src.core.errors import MalformedPayloadError, MissingFieldError

ASSET_CREATED = "video.asset.created"
ASSET_READY = "video.asset.ready"
ASSET_ERRORED = "video.asset.errored"
ASSET_DELETED = "video.asset.deleted"
TRACK_READY = "video.asset.track.ready"

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class _EventData(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PlaybackId(_EventData):
    id: NonEmptyStr
    policy: Optional[str] = None


class AssetCreatedData(_EventData):
    upload_id: NonEmptyStr
    id: NonEmptyStr
    status: NonEmptyStr


class AssetReadyData(_EventData):
    upload_id: NonEmptyStr
    id: NonEmptyStr
    status: NonEmptyStr
    playback_ids: List[PlaybackId] = Field(min_length=1)
    duration: Optional[FiniteFloat] = None  # seconds

    @property
    def playback_id(self) -> str:
        return self.playback_ids[0].id

    @property
    def duration_millis(self) -> int:
        if not self.duration:
            return 0
        return max(0, round(self.duration * 1000))


class AssetErroredData(_EventData):
    upload_id: NonEmptyStr
    status: NonEmptyStr


class AssetDeletedData(_EventData):
    upload_id: NonEmptyStr


class TrackReadyData(_EventData):
    asset_id: NonEmptyStr
    id: NonEmptyStr
    status: NonEmptyStr


class MuxEventEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    data: dict = Field(default_factory=dict)


_MISSING_ERROR_TYPES = {"missing", "too_short", "string_too_short", "string_type", "list_type"}

DataT = TypeVar("DataT", bound=_EventData)


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def decode_event_data(model: Type[DataT], data: dict) -> DataT:
    """
    Validates ``data`` against ``model``.

    Absent or null required fields raise MissingFieldError; any other shape
    problem raises MalformedPayloadError.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        missing = [
            _field_name(error["loc"])
            for error in exc.errors()
            if error["type"] in _MISSING_ERROR_TYPES
            and _is_empty(data, error["loc"])
        ]
        if missing:
            raise MissingFieldError(missing) from exc
        raise MalformedPayloadError(f"Invalid {model.__name__} payload") from exc


def _is_empty(data: dict, loc: tuple) -> bool:
    value = data
    for part in loc:
        if isinstance(value, dict) and part in value:
            value = value[part]
        elif isinstance(value, list) and isinstance(part, int) and part < len(value):
            value = value[part]
        else:
            return True
    return value is None or value == "" or value == []
