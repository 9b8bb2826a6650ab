"""Inclusive time windows used to query revisions and commits."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


def to_local(value: datetime) -> datetime:
    """Normalize a datetime to an aware datetime in the local time zone.

    Naive values are interpreted as local time.
    """
    return value.astimezone()


def from_epoch_seconds(seconds: int) -> datetime:
    """Convert epoch seconds to an aware datetime in the local time zone."""
    return datetime.fromtimestamp(seconds).astimezone()


class TimeWindow(BaseModel):
    """A window of time; both bounds are inclusive and either may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = {"frozen": True}

    @field_validator("start", "end")
    @classmethod
    def _localize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_local(value) if value is not None else None

    @model_validator(mode="after")
    def _check_bounds(self) -> "TimeWindow":
        if self.start and self.end and self.start > self.end:
            raise ValueError(
                f"Window start [{self.start}] must not be after end [{self.end}]"
            )
        return self

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "TimeWindow":
        return cls(start=start, end=end)

    @classmethod
    def since(cls, start: datetime) -> "TimeWindow":
        return cls(start=start)

    @classmethod
    def until(cls, end: datetime) -> "TimeWindow":
        return cls(end=end)

    @classmethod
    def on(cls, day: date) -> "TimeWindow":
        """The whole local calendar day."""
        return cls(
            start=datetime.combine(day, time.min),
            end=datetime.combine(day, time.max),
        )

    @classmethod
    def last(
        cls, days: float = 0, hours: float = 0, now: Optional[datetime] = None
    ) -> "TimeWindow":
        """The window ending ``now`` and reaching back the given duration."""
        end = to_local(now) if now else datetime.now().astimezone()
        return cls(start=end - timedelta(days=days, hours=hours), end=end)

    def contains(self, value: datetime) -> bool:
        value = to_local(value)
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    def __contains__(self, value: datetime) -> bool:
        return self.contains(value)

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else "..."
        end = self.end.isoformat() if self.end else "..."
        return f"[{start}, {end}]"
