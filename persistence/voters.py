from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DocumentDecodeError

ISO_DATETIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|z|[+-]\d{2}:?\d{2})?$"
)


def parse_vote_date(text: str) -> datetime:
    """
    Parse an ISO-8601 / RFC 3339 timestamp of any fractional precision.

    Digits past microseconds are dropped from the returned datetime only; the
    stored text is never rewritten.
    """
    m = ISO_DATETIME_RE.match(text)
    if m is None:
        raise ValueError(f"{text!r} is not an ISO-8601 date-time")
    normalized = m.group("base").replace(" ", "T")
    frac = m.group("frac")
    if frac:
        normalized += "." + frac[:6].ljust(6, "0")
    tz = m.group("tz")
    if tz:
        if tz in ("Z", "z"):
            tz = "+00:00"
        elif ":" not in tz:
            tz = f"{tz[:3]}:{tz[3:]}"
        normalized += tz
    return datetime.fromisoformat(normalized)


class VoteRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    poll_id: int = Field(alias="PollId", ge=0)
    vote_id: int = Field(alias="VoteId", ge=0)
    # Kept as the text we were given so it round-trips byte for byte.
    vote_date: str = Field(alias="VoteDate")

    @field_validator("vote_date", mode="before")
    @classmethod
    def _vote_date_is_iso8601(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, str):
            parse_vote_date(value)
        return value


class Voter(BaseModel):
    """
    Mirrors the stored document schema exactly:
      {
        "VoterId": 1, "Name": "...", "Email": "...",
        "VoteHistory": [ { "PollId": 7, "VoteId": 2, "VoteDate": "2024-01-01T00:00:00Z" } ]
      }
    """

    model_config = ConfigDict(populate_by_name=True)

    voter_id: int = Field(alias="VoterId", ge=0)
    name: str = Field(default="", alias="Name")
    email: str = Field(default="", alias="Email")
    vote_history: list[VoteRecord] = Field(default_factory=list, alias="VoteHistory")

    @field_validator("vote_history", mode="before")
    @classmethod
    def _null_history_is_empty(cls, value: Any) -> Any:
        # Older writers stored an empty history as null.
        return [] if value is None else value

    @classmethod
    def from_doc(cls, key: str, doc: Mapping[str, Any]) -> "Voter":
        try:
            return cls.model_validate(doc)
        except ValidationError as e:
            raise DocumentDecodeError(key, f"{e.error_count()} validation error(s)") from e

    def to_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
