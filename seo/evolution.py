"""
seo/evolution.py

Direction and pace of SEO change between the oldest and newest stored
dimension snapshots.
"""

from __future__ import annotations

from dataclasses import fields

from seo.types import SeoDimensions, SeoEvolution, SeoSnapshotRecord

INCREASING_DELTA = 10
RAPID_DELTA = 25


def analyze_seo_evolution(snapshots: list[SeoSnapshotRecord]) -> SeoEvolution:
    if len(snapshots) < 2:
        return SeoEvolution(
            dominant_trend=None,
            expansion_signal="Not enough history to infer SEO evolution.",
            acceleration_level="Stable",
        )

    ordered = sorted(snapshots, key=lambda record: record.captured_at)
    first, last = ordered[0].dimensions, ordered[-1].dimensions
    deltas = [
        (field.name, getattr(last, field.name) - getattr(first, field.name)) for field in fields(SeoDimensions)
    ]
    # Stable sort: the first dimension wins ties on absolute delta.
    deltas.sort(key=lambda item: abs(item[1]), reverse=True)
    top_key, top_delta = deltas[0]

    level = "Stable"
    signal = "SEO posture appears broadly stable over the observed period."
    if abs(top_delta) >= INCREASING_DELTA:
        level = "Increasing"
        signal = "Signals indicate a measured expansion of SEO investment and focus."
    if abs(top_delta) >= RAPID_DELTA:
        level = "Rapid"
        signal = "Signals indicate accelerated SEO expansion, with marked shifts in priority dimensions."

    return SeoEvolution(
        dominant_trend=top_key if top_delta else None,
        expansion_signal=signal,
        acceleration_level=level,
    )
