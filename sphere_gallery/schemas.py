"""
Pydantic schemas for request and response data validation.
Shared by the API routes and the viewer's API client.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class StoredImageResponse(BaseModel):
    """
    Response schema for a stored image.
    Used by GET /api/images endpoint.
    """
    url: str
    id: str

    model_config = ConfigDict(
        from_attributes=True  # Enable conversion from StoredImage records
    )


class ManifestEntry(BaseModel):
    """
    Single record of the images.json manifest loaded by the viewer at startup.
    """
    url: str


class UploadResponse(BaseModel):
    """
    Response schema for a successful upload.
    Used by POST /api/upload endpoint.
    """
    image_url: str = Field(alias="imageUrl")
    id: str

    model_config = ConfigDict(
        populate_by_name=True  # Accept both image_url and imageUrl
    )


class HealthResponse(BaseModel):
    """
    Liveness check payload.
    """
    ok: bool = True


class ErrorResponse(BaseModel):
    """
    Error body returned by the exception handlers.
    """
    error: str
    detail: Optional[str] = None
