"""Punto de entrada del motor estereoquímico.

Lectura de notación lineal con descriptores R/S y E/Z, proyecciones de silla
y de Newman, y predicción heurística de mecanismos SN1/SN2/E1/E2.
"""

from .engine import (
    GeometryFailure,
    ParseFailure,
    ParseResult,
    analyze_reaction,
    map_geometry,
    parse,
    predict_from_conditions,
    predict_from_graphs,
)

__all__ = [
    "GeometryFailure",
    "ParseFailure",
    "ParseResult",
    "analyze_reaction",
    "map_geometry",
    "parse",
    "predict_from_conditions",
    "predict_from_graphs",
]
