"""Opciones de configuración para el analizador y el asignador estereoquímico."""

from dataclasses import dataclass, field


@dataclass
class ParseOptions:
    """Opciones de control del analizador de notación lineal."""

    # Profundidad máxima de la pila de ramas antes de rechazar la entrada.
    max_branch_depth: int = 64
    # Completar hidrógenos implícitos tras la lectura.
    resolve_hydrogens: bool = True
    # Anotar los identificadores de anillo en cada átomo.
    perceive_rings: bool = True


@dataclass
class PriorityOptions:
    """Opciones del clasificador de prioridades por esferas."""

    # Número de esferas comparadas (incluida la del átomo unido).
    max_spheres: int = 4


@dataclass
class StereoOptions:
    """Opciones del asignador de descriptores R/S y E/Z."""

    # Lectura de `@`/`@@`: False usa la convención de las moléculas de
    # referencia del visor (CC[C@@H](Br)C -> R); True usa la lectura Daylight.
    daylight_chirality: bool = False
    priority: PriorityOptions = field(default_factory=PriorityOptions)


@dataclass
class EngineOptions:
    """Agrupa las opciones usadas por la fachada `chemengine`."""

    parse: ParseOptions = field(default_factory=ParseOptions)
    stereo: StereoOptions = field(default_factory=StereoOptions)
