"""
strategic/trajectory.py
"""

from __future__ import annotations

from strategic.types import DIMENSION_KEYS, AccelerationLevel, TrajectoryAnalysis, TrajectorySnapshot

RAPID_DELTA = 15
INCREASING_DELTA = 5


def acceleration_for(delta: int) -> str:
    if delta >= RAPID_DELTA:
        return AccelerationLevel.RAPID
    if delta >= INCREASING_DELTA:
        return AccelerationLevel.INCREASING
    return AccelerationLevel.STABLE


def analyze_trajectory(snapshots: list[TrajectorySnapshot]) -> TrajectoryAnalysis:
    """Compare the two most recent dimension snapshots.

    Movement in either direction counts. With a single snapshot the
    strongest dimension is reported as the trend and the level is Stable.
    """
    if not snapshots:
        return TrajectoryAnalysis(dominant_trend_dimension=None, acceleration_level=AccelerationLevel.STABLE)

    ordered = sorted(snapshots, key=lambda snap: snap.captured_at)
    latest = ordered[-1]
    if len(ordered) < 2:
        strongest = max(DIMENSION_KEYS, key=latest.dimensions.get)
        return TrajectoryAnalysis(dominant_trend_dimension=strongest, acceleration_level=AccelerationLevel.STABLE)

    previous = ordered[-2]
    dominant: str | None = None
    max_delta = 0
    for key in DIMENSION_KEYS:
        delta = abs(latest.dimensions.get(key) - previous.dimensions.get(key))
        if delta > max_delta:
            dominant, max_delta = key, delta

    return TrajectoryAnalysis(dominant_trend_dimension=dominant, acceleration_level=acceleration_for(max_delta))
