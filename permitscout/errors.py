"""
Exceptions raised at permitscout's edges.
"""


class ProviderUnavailable(RuntimeError):
    """A remote boundary, city or geocoding source could not be reached or parsed."""


class DrillTransitionError(ValueError):
    """A drill-level transition was requested without the identifiers it needs."""
