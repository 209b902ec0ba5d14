"""
Pydantic schemas for driver payloads.

DriverRead doubles as the cached representation of a driver, so it must
stay JSON round-trippable and read the same whether it came from Redis
or the database.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DriverCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    team: str | None = Field(default=None, max_length=255)
    number: int | None = Field(default=None, ge=0, le=99)


class DriverRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    team: str | None = None
    number: int | None = None
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes; stored values are always UTC
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


__all__ = ["DriverCreate", "DriverRead"]
