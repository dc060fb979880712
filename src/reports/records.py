"""Score records and their persisted JSON shape."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# 9999-12-31T23:59:59.999Z, the last instant datetime can hold
MAX_TIMESTAMP_MS = 253_402_300_799_999


@dataclass(frozen=True)
class ScoreRecord:
    """One observation of a website's eco-efficiency score."""

    timestamp: int  # Milliseconds since epoch
    website_url: str
    score: float  # 0 (worst) to 1 (best)


class StoredScoreRecord(BaseModel):
    """Schema of one item of the persisted JSON array."""

    # Strict: booleans and numeric strings are not scores or timestamps
    model_config = ConfigDict(populate_by_name=True, frozen=True, strict=True)

    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP_MS)
    website_url: str = Field(..., alias="websiteUrl", min_length=1)
    carbon_score: float = Field(..., alias="carbonScore", ge=0.0, le=1.0, allow_inf_nan=False)

    @field_validator("timestamp")
    @classmethod
    def timestamp_on_calendar(cls, value: int) -> int:
        # Must convert on both the local and the UTC calendar
        try:
            datetime.fromtimestamp(value / 1000)
            datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"timestamp {value} is not a representable date") from e
        return value

    @classmethod
    def from_record(cls, record: ScoreRecord) -> "StoredScoreRecord":
        return cls(
            timestamp=record.timestamp,
            website_url=record.website_url,
            carbon_score=record.score,
        )

    def to_record(self) -> ScoreRecord:
        return ScoreRecord(
            timestamp=self.timestamp,
            website_url=self.website_url,
            score=self.carbon_score,
        )


class MalformedPayloadError(ValueError):
    """The persisted payload is not a JSON array."""


def decode_records(payload: str) -> list[ScoreRecord]:
    """
    Decode a persisted payload into records, in stored order.

    Raises MalformedPayloadError when the payload as a whole is unusable.
    Individual items that do not match the schema are dropped.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedPayloadError(f"Expected a JSON array, got {type(data).__name__}")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(StoredScoreRecord.model_validate(item).to_record())
        except ValidationError as e:
            logger.warning(f"Dropping invalid stored record at index {index}: {e.error_count()} error(s)")
    return records


def encode_records(records: list[ScoreRecord]) -> str:
    """Encode records as the persisted JSON array."""
    items: list[dict[str, Any]] = [
        StoredScoreRecord.from_record(record).model_dump(by_alias=True)
        for record in records
    ]
    return json.dumps(items, ensure_ascii=False)


def sort_newest_first(records: list[ScoreRecord]) -> list[ScoreRecord]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)
