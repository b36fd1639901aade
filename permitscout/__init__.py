"""
permitscout - Synthetic permit statistics over US administrative regions.

Seeded statistics and permit points per region, point-in-polygon helpers, and
reconciliation of local and OpenStreetMap boundaries into one leveled
collection.
"""
from .drill import DrillLevelResolver, DrillController, DrillState
from .regions import RegionDataset, build_region_dataset, load_region_dataset
from .runtime import AtlasRuntime

__all__ = [
    "DrillLevelResolver",
    "DrillController",
    "DrillState",
    "RegionDataset",
    "build_region_dataset",
    "load_region_dataset",
    "AtlasRuntime",
]
