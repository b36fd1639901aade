"""
permitscout.boundaries - Boundary reconciliation and county detail layers.

Combines the local state/county topology with Overpass and Nominatim results
into leveled, deduplicated boundary collections.
"""
from .reconcile import (
    BoundaryMatcher,
    NameLevelMatcher,
    BoundaryReconciler,
    dedupe_boundaries,
    fetch_boundaries,
)
from .cities import CountyCityLayer, CountyOutlineLookup
from .coverage import coverage_rows, admin_type_label

__all__ = [
    "BoundaryMatcher",
    "NameLevelMatcher",
    "BoundaryReconciler",
    "dedupe_boundaries",
    "fetch_boundaries",
    "CountyCityLayer",
    "CountyOutlineLookup",
    "coverage_rows",
    "admin_type_label",
]
