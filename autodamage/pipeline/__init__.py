"""Initialize pipeline package."""

from .client import DamageAnalysisClient, ModelAPIError, parse_reply
from .intake import EncodedImage, encode_image
from .orchestrator import AnalysisOrchestrator
from .session import AssessmentSession

__all__ = [
    'DamageAnalysisClient',
    'ModelAPIError',
    'parse_reply',
    'EncodedImage',
    'encode_image',
    'AnalysisOrchestrator',
    'AssessmentSession',
]
