"""Excepciones específicas del motor estereoquímico.

Los errores de lectura son terminales para la llamada que los produce: nunca
se devuelve un grafo parcial. Los fallos del mapeador de geometría y del motor
de mecanismos son igualmente tipados; el llamador debe mostrar el mensaje tal
cual, sin reintentos (son cálculos deterministas).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ParseErrorKind(str, Enum):
    """Categorías de error de lectura expuestas en `ParseFailure`."""
    SYNTAX = "syntax"
    UNBALANCED_BRANCH = "unbalanced_branch"
    UNCLOSED_RING = "unclosed_ring"
    MISMATCHED_RING_CLOSURE = "mismatched_ring_closure"
    VALENCE_VIOLATION = "valence_violation"
    UNSUPPORTED_ATOM = "unsupported_atom"


class ChemEngineError(Exception):
    """Clase base de todos los errores del motor.

    Attributes:
        code: Código legible por máquina (p. ej., "UNCLOSED_RING").
        message: Descripción para el usuario.
    """

    code = "CHEM_ENGINE_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializa el error a un diccionario compatible con JSON."""
        return {"code": self.code, "message": self.message}


class ParseError(ChemEngineError):
    """Error de lectura con posición (índice de carácter) en la notación."""

    code = "PARSE_ERROR"
    kind = ParseErrorKind.SYNTAX

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["kind"] = self.kind.value
        data["position"] = self.position
        return data


class NotationSyntaxError(ParseError):
    """Token mal formado o fuera de lugar."""
    code = "SYNTAX_ERROR"
    kind = ParseErrorKind.SYNTAX


class UnbalancedBranchError(ParseError):
    """Paréntesis de rama sin pareja."""
    code = "UNBALANCED_BRANCH"
    kind = ParseErrorKind.UNBALANCED_BRANCH


class UnclosedRingError(ParseError):
    """Dígito de cierre de anillo abierto al final de la cadena."""
    code = "UNCLOSED_RING"
    kind = ParseErrorKind.UNCLOSED_RING


class MismatchedRingClosure(ParseError):
    """Cierre de anillo incoherente (órdenes distintos, auto-cierre, duplicado)."""
    code = "MISMATCHED_RING_CLOSURE"
    kind = ParseErrorKind.MISMATCHED_RING_CLOSURE


class ValenceViolation(ParseError):
    """La suma de órdenes de enlace excede toda valencia estándar del átomo."""
    code = "VALENCE_VIOLATION"
    kind = ParseErrorKind.VALENCE_VIOLATION

    def __init__(self, message: str, position: Optional[int] = None, atom_index: Optional[int] = None) -> None:
        self.atom_index = atom_index
        super().__init__(message, position)


class UnsupportedAtomError(ParseError):
    """Símbolo de elemento desconocido o no admitido sin corchetes."""
    code = "UNSUPPORTED_ATOM"
    kind = ParseErrorKind.UNSUPPORTED_ATOM


class GeometryError(ChemEngineError):
    """Error del mapeador de conformaciones."""
    code = "GEOMETRY_ERROR"


class UnsupportedRingSize(GeometryError):
    """La geometría de silla solo está definida para anillos de seis miembros."""
    code = "UNSUPPORTED_RING_SIZE"

    def __init__(self, ring_size: int) -> None:
        self.ring_size = ring_size
        if ring_size:
            message = f"Chair geometry requires a six-membered ring, got {ring_size}"
        else:
            message = "Chair geometry requires a six-membered ring, none found"
        super().__init__(message)


class InvalidBondIndex(GeometryError):
    """Índice de enlace del anillo fuera de 0-5 para la proyección de Newman."""
    code = "INVALID_BOND_INDEX"


class InvalidPlacement(GeometryError):
    """Posición de anillo fuera de 0-5 en el estado conformacional."""
    code = "INVALID_PLACEMENT"


class MechanismError(ChemEngineError):
    """Error del motor heurístico de mecanismos."""
    code = "MECHANISM_ERROR"


class UnknownCondition(MechanismError):
    """Valor de condición de reacción fuera de su enumeración cerrada."""
    code = "UNKNOWN_CONDITION"


class AmbiguousStereocenter(UserWarning):
    """Advertencia: el centro marcado no es estereogénico (empate de prioridades).

    No se lanza; se acumula en el resultado del análisis.
    """

    def __init__(self, atom_index: int, reason: str) -> None:
        self.atom_index = atom_index
        self.reason = reason
        super().__init__(f"Atom {atom_index} is not a stereocenter: {reason}")
