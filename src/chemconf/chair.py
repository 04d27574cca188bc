"""Mapeo de un anillo de seis miembros a la conformación de silla.

La alternancia axial arriba/abajo es puramente posicional: las posiciones
pares son axiales hacia arriba en la silla sin invertir y la inversión
intercambia todo el patrón. El mapeador nunca consulta los descriptores R/S;
la colocación axial/ecuatorial la decide el llamador en `ConformationalState`.

La tensión es la suma de valores A de los sustituyentes axiales; no se modelan
términos cruzados 1,3-diaxiales entre sustituyentes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from chemcalc.rings import find_rings, ring_order
from chemcore.errors import GeometryError, UnsupportedRingSize
from chemcore.model import MoleculeGraph

from .avalues import a_value, classify_substituent
from .newman import NewmanProjection, newman_projection
from .state import RING_SIZE, ConformationalState, Placement

logger = logging.getLogger(__name__)

# RT a 298 K en kcal/mol.
RT_298 = 0.592


@dataclass(frozen=True)
class PlacedSubstituent:
    """Sustituyente de una posición con su colocación en el marco actual."""
    atom_index: int
    element: str
    group: Optional[str]
    a_value: Optional[float]
    placement: Placement
    base_placement: Placement
    direction: str

    @property
    def label(self) -> str:
        return self.group or self.element

    @property
    def is_axial(self) -> bool:
        return self.placement is Placement.AXIAL


@dataclass(frozen=True)
class RingPosition:
    position: int
    atom_index: int
    axial_up: bool
    substituents: Tuple[PlacedSubstituent, ...] = ()

    def placed(self, placement: Placement) -> Optional[PlacedSubstituent]:
        for substituent in self.substituents:
            if substituent.placement is placement:
                return substituent
        return None


@dataclass(frozen=True)
class StrainReport:
    """Comparación energética de las dos sillas.

    Attributes:
        current: Suma de valores A axiales en la silla mostrada (kcal/mol).
        flipped: Lo mismo para la silla invertida.
        delta: |current - flipped|.
        preferred: "current" o "flipped" (la actual si empatan).
        percent_preferred: Población de la silla preferida a 298 K (%).
        axial_groups: Etiquetas de los sustituyentes axiales actuales.
    """
    current: float
    flipped: float
    delta: float
    preferred: str
    percent_preferred: float
    axial_groups: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectionRecord:
    ring_atoms: Tuple[int, ...]
    flipped: bool
    positions: Tuple[RingPosition, ...]
    strain: StrainReport
    newman: Optional[NewmanProjection] = None

    def position_of(self, atom_index: int) -> int:
        return self.ring_atoms.index(atom_index)

    def substituents(self) -> List[PlacedSubstituent]:
        return [sub for position in self.positions for sub in position.substituents]


def axial_up(position: int, flipped: bool) -> bool:
    """True si el enlace axial de la posición apunta hacia arriba."""
    return (position % 2 == 0) != flipped


def select_ring(graph: MoleculeGraph, ring_index: int = 0) -> List[int]:
    """Devuelve el anillo de seis miembros en numeración canónica.

    Raises:
        UnsupportedRingSize: Si no hay anillos de seis miembros.
        GeometryError: Si `ring_index` no existe o el anillo no es simple.
    """
    rings = find_rings(graph)
    six = [ring for ring in rings if len(ring) == RING_SIZE]
    if not six:
        raise UnsupportedRingSize(len(rings[0]) if rings else 0)
    if not 0 <= ring_index < len(six):
        raise GeometryError(f"Ring index {ring_index} out of range ({len(six)} six-membered rings)")
    order = ring_order(graph, six[ring_index])
    if not order:
        raise GeometryError("Six-membered ring is not a simple cycle")
    return order


def map_geometry(
    graph: MoleculeGraph,
    state: ConformationalState,
    requested_bond_index: Optional[int] = None,
    ring_index: int = 0,
) -> ProjectionRecord:
    """Combina el anillo del grafo con el estado conformacional del llamador.

    Args:
        graph: Grafo resuelto que contiene al menos un anillo de seis miembros.
        state: Estado conformacional; solo se lee.
        requested_bond_index: Enlace 0-5 para la proyección de Newman.
        ring_index: Cuál de los anillos de seis miembros usar.

    Returns:
        `ProjectionRecord` con posiciones, tensión y Newman opcional.

    Raises:
        UnsupportedRingSize: Anillo de tamaño distinto de seis o sin anillo.
        InvalidBondIndex: `requested_bond_index` fuera de 0-5.
    """
    ring = select_ring(graph, ring_index)
    ring_set = set(ring)
    flipped = state.flipped
    positions: List[RingPosition] = []
    for position, atom_index in enumerate(ring):
        up = axial_up(position, flipped)
        base = state.placement_for(position)
        placed: List[PlacedSubstituent] = []
        for nbr in graph.neighbors(atom_index):
            if nbr in ring_set:
                continue
            group = classify_substituent(graph, atom_index, nbr)
            current = base.opposite() if flipped else base
            placed.append(
                PlacedSubstituent(
                    atom_index=nbr,
                    element=graph.atom(nbr).element,
                    group=group,
                    a_value=a_value(group),
                    placement=current,
                    base_placement=base,
                    direction="up" if (current is Placement.AXIAL) == up else "down",
                )
            )
            base = base.opposite()
        positions.append(RingPosition(position, atom_index, up, tuple(placed)))

    strain = compare_conformations(positions)
    newman = None
    if requested_bond_index is not None:
        newman = newman_projection(positions, requested_bond_index)
    logger.debug("Mapped ring %s (flipped=%s): strain %.2f", ring, flipped, strain.current)
    return ProjectionRecord(tuple(ring), flipped, tuple(positions), strain, newman)


def compare_conformations(positions: Sequence[RingPosition]) -> StrainReport:
    """Calcula la tensión de la silla actual y la invertida.

    Los grupos sin valor A tabulado contribuyen 0.
    """
    current = 0.0
    flipped = 0.0
    axial_groups: List[str] = []
    for position in positions:
        for substituent in position.substituents:
            value = substituent.a_value or 0.0
            if substituent.is_axial:
                current += value
                axial_groups.append(substituent.label)
            else:
                flipped += value
    current = round(current, 3)
    flipped = round(flipped, 3)
    delta = round(abs(current - flipped), 3)
    preferred = "current" if current <= flipped else "flipped"
    return StrainReport(
        current=current,
        flipped=flipped,
        delta=delta,
        preferred=preferred,
        percent_preferred=boltzmann_percent(delta),
        axial_groups=tuple(axial_groups),
    )


def boltzmann_percent(delta: float, rt: float = RT_298) -> float:
    """Población (%) de la silla más estable para una diferencia `delta`."""
    if delta < 0.001:
        return 50.0
    k = math.exp(delta / rt)
    return round(k / (k + 1) * 100, 1)
