"""
strategic/snapshot.py

One-glance competitive snapshot: identity label, summary, strengths,
vulnerabilities, risk level and trajectory signal.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from intelligence.selection import select
from strategic.brief import level
from strategic.types import AccelerationLevel, PressureLevel, StrategicDimensions, TrajectoryAnalysis

DIMENSION_STRENGTH_LABELS: dict[str, str] = {
    "strategic_elevation": "Strong strategic positioning narrative",
    "service_breadth": "Broad service coverage",
    "vertical_depth": "Clear vertical specialization",
    "enterprise_orientation": "Enterprise-oriented messaging",
    "monetization_maturity": "Mature pricing structure",
    "market_momentum": "Active repositioning signals",
}

RISK_EXPLANATIONS: dict[str, str] = {
    PressureLevel.LOW: "Competitive pressure from peers currently appears limited.",
    PressureLevel.MODERATE: (
        "One key strategic area shows overlap with peers; monitor for emerging head-to-head positioning."
    ),
    PressureLevel.HIGH: (
        "Multiple high-impact dimensions overlap with peers, increasing the risk of direct competitive pressure."
    ),
}

TRAJECTORY_SIGNALS: dict[str, tuple[str, str]] = {
    AccelerationLevel.STABLE: (
        "Stable",
        "Recent signals indicate a stable strategic trajectory without pronounced directional shifts.",
    ),
    AccelerationLevel.INCREASING: (
        "Gradual Strategic Expansion",
        "Signals suggest a measured increase in strategic movement, particularly around priority dimensions.",
    ),
    AccelerationLevel.RAPID: (
        "Rapid Repositioning",
        "Recent activity indicates accelerated repositioning, with notable shifts in key strategic dimensions.",
    ),
}


@dataclass(frozen=True)
class CompetitiveSnapshot:
    identity_label: str
    summary: str
    strengths: list[str]
    vulnerabilities: list[str]
    competitive_risk_level: str
    risk_explanation: str
    trajectory_signal: str
    trajectory_explanation: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def identity_for(dims: StrategicDimensions) -> str:
    if dims.monetization_maturity > 70 and dims.strategic_elevation < 40:
        return "Pricing-Structured Operator"
    if dims.strategic_elevation > 75 and dims.enterprise_orientation > 70:
        return "Enterprise Transformation Leader"
    if dims.vertical_depth > 70 and dims.service_breadth < 50:
        return "Vertical Specialist"
    if dims.service_breadth > 70 and dims.vertical_depth < 40:
        return "Broad Capability Operator"
    return "Balanced Operator"


def summary_for(competitor_id: str, dims: StrategicDimensions, identity: str) -> str:
    return select(
        f"{competitor_id}:snapshot_summary",
        (
            f"This competitor demonstrates {level(dims.monetization_maturity)} monetization structure with "
            f"{level(dims.strategic_elevation)} strategic elevation. Current signals suggest a measured "
            "positioning rather than aggressive expansion.",
            f"Signals indicate {level(dims.strategic_elevation)} strategic elevation and "
            f"{level(dims.vertical_depth)} vertical depth, positioning the competitor as a {identity.lower()}.",
            f"Overall posture combines {level(dims.service_breadth)} service breadth with "
            f"{level(dims.enterprise_orientation)} enterprise orientation, resulting in a {identity.lower()} profile.",
        ),
    )


def vulnerability_label(strength_label: str) -> str:
    return strength_label.replace("Strong ", "").replace("Active ", "Limited ")


def risk_level_for(overlapping_count: int) -> str:
    if overlapping_count >= 2:
        return PressureLevel.HIGH
    if overlapping_count == 1:
        return PressureLevel.MODERATE
    return PressureLevel.LOW


def build_competitive_snapshot(
    *,
    competitor_id: str,
    dimensions: StrategicDimensions,
    overlapping_high_dimensions: list[str],
    trajectory: TrajectoryAnalysis,
) -> CompetitiveSnapshot:
    identity = identity_for(dimensions)
    entries = dimensions.items()
    top = sorted(entries, key=lambda item: item[1], reverse=True)[:2]
    bottom = sorted(entries, key=lambda item: item[1])[:2]

    risk_level = risk_level_for(len(overlapping_high_dimensions))
    signal, explanation = TRAJECTORY_SIGNALS.get(
        trajectory.acceleration_level, TRAJECTORY_SIGNALS[AccelerationLevel.STABLE]
    )
    return CompetitiveSnapshot(
        identity_label=identity,
        summary=summary_for(competitor_id, dimensions, identity),
        strengths=[DIMENSION_STRENGTH_LABELS[key] for key, _ in top],
        vulnerabilities=[vulnerability_label(DIMENSION_STRENGTH_LABELS[key]) for key, _ in bottom],
        competitive_risk_level=risk_level,
        risk_explanation=RISK_EXPLANATIONS[risk_level],
        trajectory_signal=signal,
        trajectory_explanation=explanation,
    )
