"""Domain models for damage records, per-image analyses and reports."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional


Severity = Literal['minor', 'moderate', 'severe']
Condition = Literal['Excellent', 'Good', 'Fair', 'Poor', 'Severely Damaged']

DEFAULT_CONDITION = 'Fair'


class CamelModel(BaseModel):
    """Base model using camelCase names on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Damage(CamelModel):
    """One detected defect on the vehicle."""
    model_config = ConfigDict(frozen=True)

    part: str = Field(..., alias='carPart', description="Affected car part, e.g. front bumper")
    damage_type: str = Field(..., description="scratch, dent, crack, broken, bent or paint peel")
    severity: Severity
    location: str = Field(..., description="front, rear, left, right or top")
    estimated_cost: float = Field(..., ge=0.0, description="Repair cost estimate in AUD")

    @field_validator('severity', mode='before')
    @classmethod
    def _normalize_severity(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def key(self) -> tuple:
        """Identity used to collapse the same damage seen in several images."""
        return (self.part, self.damage_type, self.location)


class AnalysisResult(CamelModel):
    """Structured reply of the vision model for a single image."""
    damages: List[Damage] = Field(default_factory=list)
    overall_condition: str = DEFAULT_CONDITION
    message: Optional[str] = None


class ImageAnalysis(CamelModel):
    """Analysis state of one uploaded image."""
    image_id: str
    image_name: str
    image_url: str = Field('', description="data URI used to display the image")
    damages: List[Damage] = Field(default_factory=list)
    overall_condition: str = DEFAULT_CONDITION
    message: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True once the analysis resolved without error."""
        return not self.loading and not self.error

    @property
    def total_cost(self) -> float:
        return sum(d.estimated_cost for d in self.damages)


class DamageGroup(CamelModel):
    """Count and summed cost of damages sharing a type or part."""
    count: int = Field(0, ge=0)
    total_cost: float = Field(0.0, ge=0.0)


class SeverityCounts(CamelModel):
    severe: int = Field(0, ge=0)
    moderate: int = Field(0, ge=0)
    minor: int = Field(0, ge=0)


class AggregateReport(CamelModel):
    """Combined assessment across all analysed images."""
    unique_damages: List[Damage] = Field(default_factory=list)
    total_cost: float = Field(0.0, ge=0.0)
    overall_condition: Condition = 'Excellent'
    tags: List[str] = Field(default_factory=list)
    severity_counts: SeverityCounts = Field(default_factory=SeverityCounts)
    damage_type_groups: Dict[str, DamageGroup] = Field(default_factory=dict)
    car_part_groups: Dict[str, DamageGroup] = Field(default_factory=dict)
    images_analyzed: int = Field(0, ge=0)
