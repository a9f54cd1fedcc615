"""
strategic/pressure.py

Competitive pressure against peer dimension vectors, and enterprise
positioning saturation across the tracked set.
"""

from __future__ import annotations

from intelligence.rounding import round_int
from strategic.types import (
    DIMENSION_KEYS,
    CompetitivePressureResult,
    PressureArea,
    PressureLevel,
    SaturationRisk,
    StrategicDimensions,
)

HIGH_PRESSURE = 25
MODERATE_PRESSURE = 10
HIGH_DIMENSION_SCORE = 75
SATURATION_ELEVATION = 75
SATURATION_ENTERPRISE = 70
SATURATION_MIN_COMPETITORS = 2


def overlapping_high_dimensions(own: StrategicDimensions, peers: list[StrategicDimensions]) -> list[str]:
    """Dimensions where this competitor and at least one peer both score high."""
    return [
        key
        for key in DIMENSION_KEYS
        if own.get(key) >= HIGH_DIMENSION_SCORE and any(peer.get(key) >= HIGH_DIMENSION_SCORE for peer in peers)
    ]


def compute_competitive_pressure(
    own: StrategicDimensions,
    peers: list[StrategicDimensions],
) -> CompetitivePressureResult:
    """Compare one competitor's dimensions with the peer average.

    Pressure per dimension is the peer average minus the competitor's own
    score. Only positive pressure counts towards the overall level.

    Args:
        own: Dimensions of the competitor being assessed.
        peers: Dimensions of the other tracked competitors.

    Returns:
        CompetitivePressureResult; Low with no areas when there are no peers.
    """
    if not peers:
        return CompetitivePressureResult(
            highest_pressure_dimension=None,
            overall_pressure_level=PressureLevel.LOW,
            areas=[],
        )

    areas = [
        PressureArea(
            dimension=key,
            pressure=round_int(sum(peer.get(key) for peer in peers) / len(peers) - own.get(key)),
        )
        for key in DIMENSION_KEYS
    ]
    overlapping = overlapping_high_dimensions(own, peers)

    positive = [area for area in areas if area.pressure > 0]
    if not positive:
        return CompetitivePressureResult(
            highest_pressure_dimension=None,
            overall_pressure_level=PressureLevel.LOW,
            areas=areas,
            overlapping_high_dimensions=overlapping,
        )

    highest = positive[0]
    for area in positive[1:]:
        if area.pressure > highest.pressure:
            highest = area

    if highest.pressure >= HIGH_PRESSURE:
        level = PressureLevel.HIGH
    elif highest.pressure >= MODERATE_PRESSURE:
        level = PressureLevel.MODERATE
    else:
        level = PressureLevel.LOW

    return CompetitivePressureResult(
        highest_pressure_dimension=highest.dimension,
        overall_pressure_level=level,
        areas=areas,
        overlapping_high_dimensions=overlapping,
    )


def detect_positioning_saturation(all_dimensions: list[StrategicDimensions]) -> SaturationRisk | None:
    if not all_dimensions:
        return None
    saturated = sum(
        1
        for dims in all_dimensions
        if dims.strategic_elevation > SATURATION_ELEVATION and dims.enterprise_orientation > SATURATION_ENTERPRISE
    )
    if saturated >= SATURATION_MIN_COMPETITORS:
        return SaturationRisk(has_enterprise_saturation=True, saturated_competitor_count=saturated)
    return None
