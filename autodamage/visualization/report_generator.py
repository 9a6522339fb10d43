"""Report generator for damage assessments."""

from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from loguru import logger

from ..analysis.aggregator import DamageAggregator
from ..analysis.schemas import AggregateReport, ImageAnalysis


class ReportGenerator:
    """Generates per-image and combined damage assessment reports."""

    def __init__(self, aggregator: Optional[DamageAggregator] = None):
        """Initialize report generator."""
        self.aggregator = aggregator or DamageAggregator()

    def generate_report(self, analyses: Sequence[ImageAnalysis]) -> Dict[str, Any]:
        """
        Generate a JSON-serializable report for a set of image analyses.

        Args:
            analyses: Image analyses in upload order

        Returns:
            Dictionary with timestamp, combined assessment and per-image results
        """
        combined = self.aggregator.aggregate(analyses)

        report_data = {
            'timestamp': datetime.now().isoformat(),
            'combined': combined.model_dump(by_alias=True),
            'images': [
                a.model_dump(by_alias=True, exclude={'image_url'}) for a in analyses
            ],
        }

        logger.info(
            f"Report generated for {len(analyses)} image(s): {combined.overall_condition}"
        )

        return report_data

    def generate_text_summary(self, analyses: Sequence[ImageAnalysis]) -> str:
        """
        Generate human-readable text summary.

        Args:
            analyses: Image analyses in upload order

        Returns:
            Text summary
        """
        combined = self.aggregator.aggregate(analyses)

        summary = []
        summary.append("=" * 60)
        summary.append("COMPREHENSIVE DAMAGE REPORT")
        summary.append("=" * 60)
        summary.append("")

        summary.extend(self._combined_section(combined))

        if analyses:
            summary.append("-" * 60)
            summary.append("DETAILED IMAGE ANALYSIS")
            summary.append("-" * 60)
            summary.append("")
            for analysis in analyses:
                summary.extend(self._image_section(analysis))

        summary.append("=" * 60)

        return '\n'.join(summary)

    def _combined_section(self, report: AggregateReport) -> list:
        lines = []

        if not report.unique_damages:
            lines.append("NO DAMAGES DETECTED")
            lines.append(f"Overall Condition: {report.overall_condition}")
            lines.append("")
            return lines

        counts = report.severity_counts
        lines.append(f"Unique Damages: {len(report.unique_damages)}")
        lines.append(f"Total Cost: ${report.total_cost:,.0f} AUD")
        lines.append(
            f"Severity: {counts.severe} severe, {counts.moderate} moderate, {counts.minor} minor"
        )
        lines.append(f"Overall Condition: {report.overall_condition}")
        lines.append(f"Tags: {' '.join(report.tags)}")
        lines.append("")

        lines.append("Breakdown by Type:")
        for damage_type, group in report.damage_type_groups.items():
            item = 'item' if group.count == 1 else 'items'
            lines.append(f"  {damage_type.title()}: {group.count} {item}, ${group.total_cost:,.0f} AUD")
        lines.append("")

        lines.append("Breakdown by Part:")
        for part, group in report.car_part_groups.items():
            item = 'item' if group.count == 1 else 'items'
            lines.append(f"  {part}: {group.count} {item}, ${group.total_cost:,.0f} AUD")
        lines.append("")

        for i, damage in enumerate(report.unique_damages, 1):
            lines.append(f"Damage #{i}:")
            lines.append(f"  Part: {damage.part}")
            lines.append(f"  Type: {damage.damage_type.title()}")
            lines.append(f"  Location: {damage.location}")
            lines.append(f"  Severity: {damage.severity.upper()}")
            lines.append(f"  Estimated Cost: ${damage.estimated_cost:,.0f} AUD")
            lines.append("")

        return lines

    def _image_section(self, analysis: ImageAnalysis) -> list:
        lines = [f"Image: {analysis.image_name}"]

        if analysis.loading:
            lines.append("  Status: ANALYZING")
        elif analysis.error:
            lines.append(f"  Status: ERROR ({analysis.error})")
        else:
            lines.append(f"  Condition: {analysis.overall_condition}")
            lines.append(f"  Damages: {len(analysis.damages)}")
            lines.append(f"  Estimated Cost: ${analysis.total_cost:,.0f} AUD")
            if analysis.message:
                lines.append(f"  Note: {analysis.message}")

        lines.append("")
        return lines
