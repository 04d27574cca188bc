"""API pública de cálculos químicos auxiliares."""

from .formula import formula_difference, format_formula, molecular_formula
from .rings import annotate_rings, find_rings, is_simple_ring, ring_order
from .valence import (
    MAX_VALENCE,
    STANDARD_VALENCES,
    check_valence,
    implicit_h_count,
    resolve_hydrogens,
)

__all__ = [
    "molecular_formula",
    "formula_difference",
    "format_formula",
    "annotate_rings",
    "find_rings",
    "ring_order",
    "is_simple_ring",
    "implicit_h_count",
    "resolve_hydrogens",
    "check_valence",
    "STANDARD_VALENCES",
    "MAX_VALENCE",
]
