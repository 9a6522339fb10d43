"""AutoDamage Pro: AI-assisted vehicle damage assessment."""

__version__ = "1.0.0"
