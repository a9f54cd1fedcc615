"""
strategic/orchestrator.py
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.scraping.logging_utils import log_event
from strategic.brief import generate_executive_brief
from strategic.dimensions import compute_strategic_dimensions
from strategic.pressure import compute_competitive_pressure, detect_positioning_saturation
from strategic.trajectory import analyze_trajectory
from strategic.types import StrategicDimensions, StrategicModelResult, StrategicRawSignals, TrajectorySnapshot

logger = logging.getLogger(__name__)


def run_strategic_model(
    raw: StrategicRawSignals,
    *,
    peer_dimensions: list[StrategicDimensions] | None = None,
    trajectory_snapshots: list[TrajectorySnapshot] | None = None,
    now: datetime | None = None,
) -> StrategicModelResult:
    """Score one competitor and place it against its peers.

    Without stored history the current dimensions are the only trajectory
    point, which always reads as Stable.
    """
    peers = list(peer_dimensions or [])
    dimensions_result = compute_strategic_dimensions(raw)
    dims = dimensions_result.dimensions

    snapshots = list(trajectory_snapshots or [])
    if not snapshots:
        snapshots = [TrajectorySnapshot(captured_at=now or datetime.now(timezone.utc), dimensions=dims)]

    pressure = compute_competitive_pressure(dims, peers)
    saturation = detect_positioning_saturation([dims, *peers])
    trajectory = analyze_trajectory(snapshots)
    brief = generate_executive_brief(
        competitor_id=raw.competitor_id,
        dimensions=dims,
        pressure=pressure,
        trajectory=trajectory,
        saturation=saturation,
        flags=dimensions_result.flags,
    )

    log_event(
        logger,
        logging.DEBUG,
        "strategic_model_built",
        competitor_id=raw.competitor_id,
        archetype=brief.archetype,
        pressure=pressure.overall_pressure_level,
        acceleration=trajectory.acceleration_level,
    )
    return StrategicModelResult(
        dimensions_result=dimensions_result,
        pressure=pressure,
        saturation=saturation,
        trajectory=trajectory,
        brief=brief,
    )
