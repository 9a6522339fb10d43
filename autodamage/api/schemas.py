"""Pydantic schemas for API requests and responses."""

from pydantic import Field
from typing import List, Optional

from ..analysis.schemas import CamelModel, ImageAnalysis


class AnalyzeRequest(CamelModel):
    """Single image submitted for analysis."""
    image_base64: Optional[str] = Field(None, description="Image as a base64 data URI")
    image_name: Optional[str] = None


class ImageListResponse(CamelModel):
    """Images held by the current assessment session."""
    images: List[ImageAnalysis] = []


class UploadResponse(CamelModel):
    """Placeholders published for accepted uploads."""
    images: List[ImageAnalysis] = []
    rejected: List[str] = Field([], description="Names of uploads that are not images")


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    version: str
    model_configured: bool


class ErrorResponse(CamelModel):
    """Error response."""
    error: str
    message: Optional[str] = None
