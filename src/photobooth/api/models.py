"""Request models for the photobooth API.

Fields are optional so that a missing value reaches the service, which
answers with the API's own 400 error instead of a schema error.
"""

from pydantic import BaseModel


class PhotoCreate(BaseModel):
    """Body of ``POST /api/photos``."""

    filename: str | None = None
    data_url: str | None = None


class CollageCreate(BaseModel):
    """Body of ``POST /api/collages``."""

    title: str | None = None
    format: str | None = None
    data_url: str | None = None
