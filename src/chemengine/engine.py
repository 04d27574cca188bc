"""Fachada pública del motor estereoquímico.

Las funciones de esta capa nunca propagan los errores tipados de las capas
inferiores: los convierten en registros de fallo (`ParseFailure`,
`GeometryFailure`) que el llamador muestra tal cual. Las excepciones ajenas a
`ChemEngineError` sí se propagan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from chemconf import chair
from chemconf.chair import ProjectionRecord
from chemconf.state import ConformationalState
from chemcore.errors import GeometryError, ParseError, ParseErrorKind
from chemcore.model import MoleculeGraph
from chemcore.options import EngineOptions
from chemmech import graph_diff, predictor
from chemmech.graph_diff import ReactionAnalysis
from chemmech.predictor import MechanismPrediction
from chemmech.tables import ReactionConditions
from chemparse.parser import parse_molecule
from chemstereo.descriptors import StereoAssignment, assign_stereo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """Grafo resuelto junto con sus descriptores estereoquímicos."""
    graph: MoleculeGraph
    stereo: StereoAssignment

    @property
    def warnings(self):
        return self.stereo.warnings


@dataclass(frozen=True)
class ParseFailure:
    kind: ParseErrorKind
    position: Optional[int]
    message: str
    code: str = "PARSE_ERROR"

    @classmethod
    def from_error(cls, error: ParseError) -> "ParseFailure":
        return cls(error.kind, error.position, error.message, error.code)


@dataclass(frozen=True)
class GeometryFailure:
    code: str
    message: str

    @classmethod
    def from_error(cls, error: GeometryError) -> "GeometryFailure":
        return cls(error.code, error.message)


def parse(notation: str, options: Optional[EngineOptions] = None) -> Union[ParseResult, ParseFailure]:
    """Lee la notación, resuelve hidrógenos y asigna R/S y E/Z.

    Args:
        notation: Cadena en notación lineal (p. ej., "CC[C@@H](Br)C").
        options: Opciones de lectura y de convención estereoquímica.

    Returns:
        `ParseResult` o, si la cadena es inválida, `ParseFailure` con el tipo
        de error y la posición del carácter.
    """
    options = options or EngineOptions()
    try:
        graph = parse_molecule(notation, options.parse)
    except ParseError as exc:
        logger.debug("Parse of %r failed: %s", notation, exc.message)
        return ParseFailure.from_error(exc)
    return ParseResult(graph, assign_stereo(graph, options.stereo))


def map_geometry(
    graph: MoleculeGraph,
    state: ConformationalState,
    requested_bond_index: Optional[int] = None,
    ring_index: int = 0,
) -> Union[ProjectionRecord, GeometryFailure]:
    """Proyección de silla/Newman; los errores de geometría se devuelven como registro."""
    try:
        return chair.map_geometry(graph, state, requested_bond_index, ring_index)
    except GeometryError as exc:
        logger.debug("Geometry mapping failed: %s", exc.message)
        return GeometryFailure.from_error(exc)


def predict_from_conditions(conditions: ReactionConditions) -> List[MechanismPrediction]:
    return predictor.predict_from_conditions(conditions)


def predict_from_graphs(reactant: MoleculeGraph, product: MoleculeGraph) -> ReactionAnalysis:
    return graph_diff.predict_from_graphs(reactant, product)


def analyze_reaction(
    reactant_notation: str,
    product_notation: str,
    options: Optional[EngineOptions] = None,
) -> Union[ReactionAnalysis, ParseFailure]:
    """Lee reactivo y producto y clasifica la reacción por diferencia de grafos.

    Returns:
        `ReactionAnalysis`, o el `ParseFailure` de la primera cadena inválida.
    """
    parsed = []
    for notation in (reactant_notation, product_notation):
        result = parse(notation, options)
        if isinstance(result, ParseFailure):
            return result
        parsed.append(result.graph)
    return graph_diff.predict_from_graphs(parsed[0], parsed[1])
