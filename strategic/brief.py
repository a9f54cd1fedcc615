"""
strategic/brief.py

Five-section executive brief with an archetype label. Where a section has
more than one phrasing, the choice is a stable hash of the competitor id.
"""

from __future__ import annotations

from intelligence.selection import select
from strategic.dimensions import BREADTH_WITHOUT_FOCUS
from strategic.types import (
    AccelerationLevel,
    CompetitivePressureResult,
    ExecutiveBrief,
    ExecutiveBriefSection,
    PressureLevel,
    SaturationRisk,
    StrategicDimensions,
    TrajectoryAnalysis,
)

MAX_STRUCTURAL_RISKS = 3


def level(score: int) -> str:
    if score >= 75:
        return "high"
    if score >= 50:
        return "moderate"
    return "low"


def humanize(dimension: str) -> str:
    return dimension.replace("_", " ")


def archetype_for(dims: StrategicDimensions) -> str:
    if dims.strategic_elevation >= 75 and dims.enterprise_orientation >= 70:
        return "Enterprise strategic transformer"
    if dims.service_breadth >= 70 and dims.vertical_depth < 40:
        return "Broad portfolio generalist"
    if dims.vertical_depth >= 60:
        return "Segment-focused specialist"
    return "Balanced operator"


def pressure_line(pressure: CompetitivePressureResult) -> str:
    if pressure.highest_pressure_dimension and pressure.overall_pressure_level != PressureLevel.LOW:
        return (
            f"Competitive pressure is strongest in {humanize(pressure.highest_pressure_dimension)}, "
            f"at a {pressure.overall_pressure_level.lower()} level."
        )
    return "Competitive pressure from tracked peers currently appears limited."


def evolution_line(trajectory: TrajectoryAnalysis) -> str:
    if trajectory.dominant_trend_dimension and trajectory.acceleration_level != AccelerationLevel.STABLE:
        return (
            f"Recent momentum indicates {trajectory.acceleration_level.lower()} movement in "
            f"{humanize(trajectory.dominant_trend_dimension)}."
        )
    return "Recent momentum suggests a stable strategic posture over the latest period."


def structural_risks(flags: list[str], saturation: SaturationRisk | None) -> list[str]:
    risks: list[str] = []
    if BREADTH_WITHOUT_FOCUS in flags:
        risks.append("Breadth without clear vertical focus may diffuse positioning.")
    if saturation is not None and saturation.has_enterprise_saturation:
        risks.append("Enterprise transformation positioning is becoming crowded among tracked peers.")
    return risks[:MAX_STRUCTURAL_RISKS] or ["No immediate structural risks are apparent from current signals."]


def generate_executive_brief(
    *,
    competitor_id: str,
    dimensions: StrategicDimensions,
    pressure: CompetitivePressureResult,
    trajectory: TrajectoryAnalysis,
    saturation: SaturationRisk | None,
    flags: list[str],
) -> ExecutiveBrief:
    d = dimensions
    identity = select(
        f"{competitor_id}:identity",
        (
            f"Competitor demonstrates {level(d.strategic_elevation)} strategic elevation "
            f"with {level(d.vertical_depth)} vertical depth.",
            f"Strategic posture skews toward {level(d.strategic_elevation)} elevation "
            f"and {level(d.service_breadth)} service breadth.",
        ),
    )
    position = select(
        f"{competitor_id}:position",
        (
            f"Enterprise orientation is {level(d.enterprise_orientation)}, "
            f"with monetization maturity at {level(d.monetization_maturity)}.",
            f"Positioning leans {level(d.enterprise_orientation)} on enterprise focus "
            f"and {level(d.monetization_maturity)} on pricing maturity.",
        ),
    )

    return ExecutiveBrief(
        archetype=archetype_for(dimensions),
        sections=[
            ExecutiveBriefSection(title="Strategic Identity", lines=[identity]),
            ExecutiveBriefSection(title="Market Position", lines=[position]),
            ExecutiveBriefSection(title="Competitive Pressure", lines=[pressure_line(pressure)]),
            ExecutiveBriefSection(title="Evolution Signal", lines=[evolution_line(trajectory)]),
            ExecutiveBriefSection(title="Structural Risks", lines=structural_risks(flags, saturation)),
        ],
    )
