"""In-memory store of per-image analyses for one assessment."""

from typing import Any, List, Optional
from loguru import logger

from ..analysis.aggregator import DamageAggregator
from ..analysis.schemas import AggregateReport, ImageAnalysis


class AssessmentSession:
    """Holds one ImageAnalysis per uploaded image, in upload order.

    Entries are replaced rather than mutated, so a report built from
    ``analyses`` is never affected by a later update.
    """

    def __init__(self, aggregator: Optional[DamageAggregator] = None):
        self._analyses: List[ImageAnalysis] = []
        self.aggregator = aggregator or DamageAggregator()

    @property
    def analyses(self) -> List[ImageAnalysis]:
        """Snapshot of the current analyses."""
        return list(self._analyses)

    def __len__(self) -> int:
        return len(self._analyses)

    def add(self, analysis: ImageAnalysis) -> ImageAnalysis:
        self._analyses.append(analysis)
        logger.debug(f"Added image {analysis.image_id} ({analysis.image_name})")
        return analysis

    def get(self, image_id: str) -> Optional[ImageAnalysis]:
        for analysis in self._analyses:
            if analysis.image_id == image_id:
                return analysis
        return None

    def update(self, image_id: str, **changes: Any) -> Optional[ImageAnalysis]:
        """
        Apply changes to the analysis of an image.

        Updating an image that has since been removed is a no-op.

        Returns:
            The updated analysis, or None if the image is no longer held
        """
        for idx, analysis in enumerate(self._analyses):
            if analysis.image_id == image_id:
                updated = analysis.model_copy(update=changes)
                self._analyses[idx] = updated
                return updated

        logger.debug(f"Ignoring update for removed image {image_id}")
        return None

    def remove(self, image_id: str) -> bool:
        """Remove an image and its damages. Returns False if it was not held."""
        remaining = [a for a in self._analyses if a.image_id != image_id]
        removed = len(remaining) != len(self._analyses)
        self._analyses = remaining

        if removed:
            logger.info(f"Removed image {image_id}")
        return removed

    def clear(self):
        self._analyses = []

    def report(self) -> AggregateReport:
        """Aggregate report over the current analyses."""
        return self.aggregator.aggregate(self._analyses)
