"""Pydantic schemas for scrape run bookkeeping."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class RunOutcome(BaseModel):
    """Result of one source run, appended to the bounded run history."""

    model_config = ConfigDict(frozen=True)

    last_updated: datetime
    theater_id: str
    status: Literal["success", "error"]
    error_message: str | None = None
    movies_scraped: int = 0
    showtimes_scraped: int = 0
