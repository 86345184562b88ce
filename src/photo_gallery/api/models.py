"""Pydantic request and response models for the photo API."""

from pydantic import BaseModel, ConfigDict, Field


class DeletePhotoRequest(BaseModel):
    """Body of a delete request."""

    model_config = ConfigDict(populate_by_name=True)

    photo_url: str | None = Field(default=None, alias="photoUrl")


class PhotoListResponse(BaseModel):
    """Current photo URLs."""

    photos: list[str]


class PhotoMutationResponse(BaseModel):
    """Result of an upload or delete."""

    ok: bool = True
    photos: list[str]


class ErrorResponse(BaseModel):
    """Error payload returned for failed requests."""

    ok: bool = False
    error: str
