"""Revision model: one commit's contribution to one file."""

from datetime import date, datetime, time
from functools import total_ordering

from pydantic import BaseModel, field_validator

from git_provenance.models.author import Author
from git_provenance.models.time_window import to_local


@total_ordering
class Revision(BaseModel):
    """A single revision of a source file.

    Revisions are identified by the commit ``id`` and ordered
    chronologically.
    """

    author: Author
    date_time: datetime
    id: str

    model_config = {"frozen": True}

    @field_validator("date_time")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return to_local(value)

    @property
    def date(self) -> date:
        return self.date_time.date()

    @property
    def time(self) -> time:
        return self.date_time.timetz()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Revision") -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.date_time < other.date_time

    def __str__(self) -> str:
        return self.id
