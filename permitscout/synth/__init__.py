"""
permitscout.synth - Deterministic synthetic permit data.

Seeded sequences, per-region statistics, and permit point fields.
"""
from .rng import SeededSequenceGenerator, seed_from_identity, generator_for
from .stats import StatisticsRecord, synthesize_stats, aggregate_stats, top_hotspots
from .permits import generate_permit_points, PERMIT_TYPES

__all__ = [
    "SeededSequenceGenerator",
    "seed_from_identity",
    "generator_for",
    "StatisticsRecord",
    "synthesize_stats",
    "aggregate_stats",
    "top_hotspots",
    "generate_permit_points",
    "PERMIT_TYPES",
]
