"""API pública del núcleo de datos del motor estereoquímico.

Reexpone el modelo de grafo, la taxonomía de errores y las opciones.
"""

from chemcore.errors import (
    AmbiguousStereocenter,
    ChemEngineError,
    GeometryError,
    InvalidBondIndex,
    InvalidPlacement,
    MechanismError,
    MismatchedRingClosure,
    NotationSyntaxError,
    ParseError,
    ParseErrorKind,
    UnbalancedBranchError,
    UnclosedRingError,
    UnknownCondition,
    UnsupportedAtomError,
    UnsupportedRingSize,
    ValenceViolation,
)
from chemcore.model import (
    IMPLICIT_H,
    Atom,
    Bond,
    BondDirection,
    BondOrder,
    ChiralClass,
    MoleculeGraph,
)
from chemcore.options import EngineOptions, ParseOptions, PriorityOptions, StereoOptions

__all__ = [
    "IMPLICIT_H",
    "Atom",
    "Bond",
    "BondDirection",
    "BondOrder",
    "ChiralClass",
    "MoleculeGraph",
    "EngineOptions",
    "ParseOptions",
    "PriorityOptions",
    "StereoOptions",
    "AmbiguousStereocenter",
    "ChemEngineError",
    "GeometryError",
    "InvalidBondIndex",
    "InvalidPlacement",
    "MechanismError",
    "MismatchedRingClosure",
    "NotationSyntaxError",
    "ParseError",
    "ParseErrorKind",
    "UnbalancedBranchError",
    "UnclosedRingError",
    "UnknownCondition",
    "UnsupportedAtomError",
    "UnsupportedRingSize",
    "ValenceViolation",
]
