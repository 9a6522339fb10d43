"""Initialize API package."""

from .app import app
from .schemas import AnalyzeRequest, ErrorResponse, HealthResponse, ImageListResponse, UploadResponse

__all__ = [
    'app',
    'AnalyzeRequest',
    'ErrorResponse',
    'HealthResponse',
    'ImageListResponse',
    'UploadResponse',
]
