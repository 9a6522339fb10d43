"""Aggregation of per-image damage lists into a combined assessment."""

from typing import Dict, List, Iterable, Callable
from loguru import logger

from .schemas import (
    AggregateReport,
    Condition,
    Damage,
    DamageGroup,
    ImageAnalysis,
    SeverityCounts,
)


# Damage type -> category tag
DAMAGE_TYPE_TAGS = {
    'scratch': '#Scratch',
    'dent': '#Dent',
    'crack': '#Crack',
    'broken': '#Broken',
    'bent': '#Bent',
    'paint peel': '#PaintWork',
}

ACCIDENT_TAG = '#AccidentDamage'
MAJOR_REPAIR_TAG = '#MajorRepair'
MINOR_REPAIR_TAG = '#MinorRepair'

SEVERELY_DAMAGED_COST = 10000
POOR_COST = 5000
FAIR_COST = 2000
GOOD_COST = 500
MAJOR_REPAIR_COST = 5000


class DamageAggregator:
    """Merges damages across images and derives totals, condition and tags."""

    def aggregate(self, analyses: Iterable[ImageAnalysis]) -> AggregateReport:
        """
        Build the combined report for a set of image analyses.

        Analyses still loading or in error are ignored.

        Args:
            analyses: Image analyses in upload order

        Returns:
            Aggregate report over the deduplicated damages
        """
        completed = [a for a in analyses if a.is_complete]

        all_damages = []
        for analysis in completed:
            all_damages.extend(analysis.damages)

        unique_damages = self.deduplicate(all_damages)
        total_cost = sum(d.estimated_cost for d in unique_damages)
        counts = self.count_severities(unique_damages)

        report = AggregateReport(
            unique_damages=unique_damages,
            total_cost=total_cost,
            overall_condition=self.classify_condition(unique_damages, total_cost),
            tags=self.generate_tags(unique_damages, total_cost),
            severity_counts=counts,
            damage_type_groups=self.group_by(unique_damages, lambda d: d.damage_type),
            car_part_groups=self.group_by(unique_damages, lambda d: d.part),
            images_analyzed=len(completed),
        )

        logger.debug(
            f"Aggregated {len(all_damages)} damage(s) from {len(completed)} image(s) "
            f"into {len(unique_damages)} unique, total ${total_cost:,.2f}"
        )

        return report

    def deduplicate(self, damages: Iterable[Damage]) -> List[Damage]:
        """
        Collapse damages sharing (part, damage type, location).

        The costliest record of each key is kept, at the position where
        the key was first seen. Equal costs keep the earlier record.
        """
        unique: List[Damage] = []
        index_by_key: Dict[tuple, int] = {}

        for damage in damages:
            idx = index_by_key.get(damage.key)
            if idx is None:
                index_by_key[damage.key] = len(unique)
                unique.append(damage)
            elif damage.estimated_cost > unique[idx].estimated_cost:
                unique[idx] = damage

        return unique

    def count_severities(self, damages: List[Damage]) -> SeverityCounts:
        return SeverityCounts(
            severe=sum(1 for d in damages if d.severity == 'severe'),
            moderate=sum(1 for d in damages if d.severity == 'moderate'),
            minor=sum(1 for d in damages if d.severity == 'minor'),
        )

    def classify_condition(self, damages: List[Damage], total_cost: float) -> Condition:
        """Map damage counts and total cost to the five-level condition scale."""
        counts = self.count_severities(damages)

        if counts.severe >= 3 or total_cost > SEVERELY_DAMAGED_COST:
            return 'Severely Damaged'
        if counts.severe >= 1 or counts.moderate >= 3 or total_cost > POOR_COST:
            return 'Poor'
        if counts.moderate >= 1 or total_cost > FAIR_COST:
            return 'Fair'
        if len(damages) > 0 and total_cost > GOOD_COST:
            return 'Good'
        return 'Excellent'

    def generate_tags(self, damages: List[Damage], total_cost: float) -> List[str]:
        """Category tags: one per known damage type, then accident and repair scale."""
        tags = []

        # dict keeps first-seen order of damage types
        for damage_type in dict.fromkeys(d.damage_type for d in damages):
            tag = DAMAGE_TYPE_TAGS.get(damage_type)
            if tag:
                tags.append(tag)

        if damages:
            tags.append(ACCIDENT_TAG)

        has_severe = any(d.severity == 'severe' for d in damages)
        if total_cost > MAJOR_REPAIR_COST or has_severe:
            tags.append(MAJOR_REPAIR_TAG)
        elif total_cost > 0:
            tags.append(MINOR_REPAIR_TAG)

        return tags

    def group_by(
        self,
        damages: List[Damage],
        key: Callable[[Damage], str]
    ) -> Dict[str, DamageGroup]:
        """Count and sum costs of damages grouped by the given attribute."""
        groups: Dict[str, DamageGroup] = {}

        for damage in damages:
            name = key(damage)
            group = groups.setdefault(name, DamageGroup())
            group.count += 1
            group.total_cost += damage.estimated_cost

        return groups


def aggregate_damages(analyses: Iterable[ImageAnalysis]) -> AggregateReport:
    """Convenience wrapper around DamageAggregator.aggregate."""
    return DamageAggregator().aggregate(analyses)
