"""
strategic/types.py

Records for the six-dimension strategic model.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any

from intelligence.types import EvidenceItem

DIMENSION_KEYS = (
    "strategic_elevation",
    "service_breadth",
    "vertical_depth",
    "enterprise_orientation",
    "monetization_maturity",
    "market_momentum",
)


class PressureLevel:
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class AccelerationLevel:
    STABLE = "Stable"
    INCREASING = "Increasing"
    RAPID = "Rapid"


@dataclass(frozen=True)
class StrategicDimensions:
    """Six 0-100 scores; field order matches DIMENSION_KEYS."""

    strategic_elevation: int = 0
    service_breadth: int = 0
    vertical_depth: int = 0
    enterprise_orientation: int = 0
    monetization_maturity: int = 0
    market_momentum: int = 0

    def get(self, key: str) -> int:
        return getattr(self, key)

    def items(self) -> list[tuple[str, int]]:
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def to_dict(self) -> dict[str, int]:
        return dict(self.items())

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "StrategicDimensions":
        values: dict[str, int] = {}
        for key in DIMENSION_KEYS:
            raw = payload.get(key)
            values[key] = int(raw) if isinstance(raw, (int, float)) else 0
        return cls(**values)


@dataclass(frozen=True)
class StrategicRawSignals:
    """Pre-aggregated counts and flags feeding the dimension formulas."""

    competitor_id: str
    strategic_terms: int = 0
    execution_terms: int = 0
    lifecycle_terms: int = 0
    service_count: int = 0
    industries_detected: list[str] = field(default_factory=list)
    enterprise_keywords: int = 0
    case_studies_present: bool = False
    certifications_count: int = 0
    pricing_transparent: bool = False
    multiple_tiers_detected: bool = False
    enterprise_tier_detected: bool = False
    recent_change_count_30d: int = 0
    structural_trait_shifts_detected: bool = False


@dataclass(frozen=True)
class DimensionScoreDetail:
    dimension: str
    score: int
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class StrategicDimensionsResult:
    dimensions: StrategicDimensions
    details: list[DimensionScoreDetail]
    flags: list[str]
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class PressureArea:
    dimension: str
    pressure: int


@dataclass(frozen=True)
class CompetitivePressureResult:
    highest_pressure_dimension: str | None
    overall_pressure_level: str
    areas: list[PressureArea]
    overlapping_high_dimensions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SaturationRisk:
    has_enterprise_saturation: bool
    saturated_competitor_count: int


@dataclass(frozen=True)
class TrajectorySnapshot:
    captured_at: datetime
    dimensions: StrategicDimensions


@dataclass(frozen=True)
class TrajectoryAnalysis:
    dominant_trend_dimension: str | None
    acceleration_level: str


@dataclass(frozen=True)
class ExecutiveBriefSection:
    title: str
    lines: list[str]


@dataclass(frozen=True)
class ExecutiveBrief:
    archetype: str
    sections: list[ExecutiveBriefSection]


@dataclass(frozen=True)
class StrategicModelResult:
    dimensions_result: StrategicDimensionsResult
    pressure: CompetitivePressureResult
    saturation: SaturationRisk | None
    trajectory: TrajectoryAnalysis
    brief: ExecutiveBrief

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
