"""Pydantic schemas for theater data."""

from pydantic import BaseModel, ConfigDict


class Theater(BaseModel):
    """Static theater identity, defined by the source that serves it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    address: str
    city: str
    zip: str
    website: str
    phone: str | None = None
