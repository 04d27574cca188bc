"""Geometría de silla, proyecciones de Newman y tensión por valores A."""

from .avalues import A_VALUES, a_value, classify_substituent
from .chair import (
    PlacedSubstituent,
    ProjectionRecord,
    RingPosition,
    StrainReport,
    axial_up,
    boltzmann_percent,
    compare_conformations,
    map_geometry,
    select_ring,
)
from .newman import NewmanProjection, NewmanSubstituent, NewmanView, newman_projection
from .state import ConformationalState, Placement

__all__ = [
    "A_VALUES",
    "a_value",
    "classify_substituent",
    "PlacedSubstituent",
    "ProjectionRecord",
    "RingPosition",
    "StrainReport",
    "axial_up",
    "boltzmann_percent",
    "compare_conformations",
    "map_geometry",
    "select_ring",
    "NewmanProjection",
    "NewmanSubstituent",
    "NewmanView",
    "newman_projection",
    "ConformationalState",
    "Placement",
]
