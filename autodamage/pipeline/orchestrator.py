"""Concurrent analysis of uploaded images."""

import asyncio
from typing import List, Sequence
from loguru import logger

from ..analysis.schemas import DEFAULT_CONDITION, ImageAnalysis
from .client import DamageAnalysisClient
from .intake import EncodedImage
from .session import AssessmentSession


ANALYSIS_FAILED_MESSAGE = "Analysis failed"


class AnalysisOrchestrator:
    """Publishes uploads to a session and fills in their analyses."""

    def __init__(self, client: DamageAnalysisClient, session: AssessmentSession):
        """
        Initialize orchestrator.

        Args:
            client: Client used for the outbound model calls
            session: Session receiving the per-image results
        """
        self.client = client
        self.session = session

    def submit(self, images: Sequence[EncodedImage]) -> List[ImageAnalysis]:
        """
        Add a loading placeholder to the session for each image.

        Returns:
            The placeholders, in the given order
        """
        placeholders = []

        for image in images:
            placeholder = ImageAnalysis(
                image_id=image.image_id,
                image_name=image.name,
                image_url=image.data_uri,
                damages=[],
                overall_condition=DEFAULT_CONDITION,
                loading=True,
            )
            placeholders.append(self.session.add(placeholder))

        return placeholders

    async def run(self, images: Sequence[EncodedImage]):
        """Analyze all images concurrently, recording each outcome in the session."""
        if not images:
            return

        logger.info(f"Analyzing {len(images)} image(s)")
        await asyncio.gather(*(self.analyze_one(image) for image in images))

    async def analyze_one(self, image: EncodedImage):
        """Analyze one image. Failures are recorded on its entry only."""
        try:
            result = await self.client.analyze(image.data_uri, image.name)
        except Exception as e:
            logger.error(f"Analysis of {image.name} failed: {e}")
            self.session.update(
                image.image_id,
                loading=False,
                damages=[],
                error=ANALYSIS_FAILED_MESSAGE,
            )
            return

        self.session.update(
            image.image_id,
            damages=result.damages,
            overall_condition=result.overall_condition,
            message=result.message,
            loading=False,
        )

    async def process(self, images: Sequence[EncodedImage]) -> List[ImageAnalysis]:
        """Submit images and wait for all analyses to finish."""
        self.submit(images)
        await self.run(images)

        results = []
        for image in images:
            analysis = self.session.get(image.image_id)
            if analysis is not None:
                results.append(analysis)
        return results
