"""Initialize utils package."""

from .config_loader import Config, get_config, reset_config
from .json_parser import extract_json_object, strip_code_fences

__all__ = [
    'Config',
    'get_config',
    'reset_config',
    'extract_json_object',
    'strip_code_fences',
]
