"""Initialize analysis package."""

from .schemas import (
    AggregateReport,
    AnalysisResult,
    Damage,
    DamageGroup,
    ImageAnalysis,
    SeverityCounts,
)
from .aggregator import DamageAggregator, aggregate_damages

__all__ = [
    'AggregateReport',
    'AnalysisResult',
    'Damage',
    'DamageGroup',
    'ImageAnalysis',
    'SeverityCounts',
    'DamageAggregator',
    'aggregate_damages',
]
