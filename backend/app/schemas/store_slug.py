"""Store Slug Schemas — availability verdict returned by the public slug check."""

from app.schemas.base import CamelModel


class SlugAvailabilityResponse(CamelModel):
    available: bool
    message: str
