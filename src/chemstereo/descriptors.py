"""Asignación de descriptores R/S y E/Z a partir de las marcas crudas.

Los marcadores `@`/`@@` y `/`/`\\` se guardan tal cual durante la lectura y
solo se resuelven aquí, cuando el grafo completo permite clasificar
prioridades. Un centro con sustituyentes empatados nunca recibe R ni S: se
informa como "no estereocentro" junto con una advertencia
`AmbiguousStereocenter`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from chemcore.errors import AmbiguousStereocenter
from chemcore.model import (
    IMPLICIT_H,
    Bond,
    BondDirection,
    BondOrder,
    ChiralClass,
    MoleculeGraph,
)
from chemcore.options import StereoOptions

from .priority import rank_substituents, substituents_of

logger = logging.getLogger(__name__)


class StereoLabel(str, Enum):
    R = "R"
    S = "S"
    NONE = "none"


class DoubleBondLabel(str, Enum):
    E = "E"
    Z = "Z"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class StereoCenter:
    """Centro tetraédrico marcado en la notación.

    Attributes:
        atom_index: Átomo central.
        neighbors: Sustituyentes en orden de lectura (`IMPLICIT_H` = H).
        chirality: Clase cruda escrita (`@` / `@@`).
        priority_order: Sustituyentes de mayor a menor prioridad; vacío si
            la clasificación no es total.
        label: R, S o `StereoLabel.NONE`.
        reason: Motivo por el que no es estereocentro, si aplica.
    """
    atom_index: int
    neighbors: Tuple[int, ...]
    chirality: ChiralClass
    priority_order: Tuple[int, ...]
    label: StereoLabel
    reason: Optional[str] = None

    @property
    def is_stereocenter(self) -> bool:
        return self.label is not StereoLabel.NONE


@dataclass(frozen=True)
class DoubleBondStereo:
    """Descriptor de un doble enlace con sus sustituyentes prioritarios."""
    bond_index: int
    atoms: Tuple[int, int]
    high_priority: Tuple[Optional[int], Optional[int]]
    label: DoubleBondLabel
    reason: Optional[str] = None


@dataclass(frozen=True)
class StereoAssignment:
    centers: Tuple[StereoCenter, ...] = ()
    double_bonds: Tuple[DoubleBondStereo, ...] = ()
    warnings: Tuple[AmbiguousStereocenter, ...] = ()

    def center(self, atom_index: int) -> Optional[StereoCenter]:
        for center in self.centers:
            if center.atom_index == atom_index:
                return center
        return None

    def label_of(self, atom_index: int) -> Optional[StereoLabel]:
        center = self.center(atom_index)
        return center.label if center is not None else None

    def double_bond(self, bond_index: int) -> Optional[DoubleBondStereo]:
        for record in self.double_bonds:
            if record.bond_index == bond_index:
                return record
        return None

    @property
    def labels(self) -> List[str]:
        """Descriptores resueltos en orden de átomo (solo R/S y E/Z)."""
        found = [c.label.value for c in self.centers if c.is_stereocenter]
        found.extend(
            d.label.value for d in self.double_bonds if d.label is not DoubleBondLabel.INDETERMINATE
        )
        return found


def assign_stereo(graph: MoleculeGraph, options: Optional[StereoOptions] = None) -> StereoAssignment:
    """Resuelve todos los centros marcados y dobles enlaces candidatos.

    Args:
        graph: Grafo con hidrógenos resueltos (y anillos anotados).
        options: Convención de lectura de `@`/`@@` y profundidad de prioridad.

    Returns:
        `StereoAssignment` con centros, dobles enlaces y advertencias.
    """
    options = options or StereoOptions()
    centers: List[StereoCenter] = []
    warnings: List[AmbiguousStereocenter] = []
    for atom in graph.atoms:
        if atom.chirality is ChiralClass.NONE:
            continue
        center = assign_center(graph, atom.index, options)
        centers.append(center)
        if not center.is_stereocenter:
            logger.info("Atom %d demoted: %s", atom.index, center.reason)
            warnings.append(AmbiguousStereocenter(atom.index, center.reason or ""))

    double_bonds = [
        assign_double_bond(graph, bond, options)
        for bond in graph.bonds
        if _is_candidate_double_bond(graph, bond)
    ]
    return StereoAssignment(
        centers=tuple(centers),
        double_bonds=tuple(double_bonds),
        warnings=tuple(warnings),
    )


def assign_center(graph: MoleculeGraph, atom_index: int, options: Optional[StereoOptions] = None) -> StereoCenter:
    """Resuelve un centro tetraédrico a R, S o "no estereocentro"."""
    options = options or StereoOptions()
    atom = graph.atom(atom_index)
    neighbors = tuple(substituents_of(graph, atom_index))

    def demoted(reason: str) -> StereoCenter:
        return StereoCenter(atom_index, neighbors, atom.chirality, (), StereoLabel.NONE, reason)

    if len(neighbors) != 4:
        return demoted(f"expected four substituents, found {len(neighbors)}")
    if neighbors.count(IMPLICIT_H) > 1:
        return demoted("more than one hydrogen")
    if atom.chirality is ChiralClass.NONE:
        return demoted("no chirality marker")

    ranking = rank_substituents(graph, atom_index, neighbors, options.priority)
    if not ranking.is_total:
        tied = ", ".join(_describe(graph, group) for group in ranking.tied_groups())
        return demoted(f"substituents of identical priority ({tied})")

    highest, second, third, lowest = ranking.order
    viewed = (lowest, highest, second, third)
    chirality = atom.chirality
    if _permutation_parity(neighbors, viewed):
        chirality = chirality.inverted()

    if options.daylight_chirality:
        clockwise_label = StereoLabel.S
    else:
        clockwise_label = StereoLabel.R
    anticlockwise_label = StereoLabel.S if clockwise_label is StereoLabel.R else StereoLabel.R
    label = clockwise_label if chirality is ChiralClass.CLOCKWISE else anticlockwise_label
    return StereoCenter(atom_index, neighbors, atom.chirality, ranking.order, label)


def assign_double_bond(graph: MoleculeGraph, bond: Bond, options: Optional[StereoOptions] = None) -> DoubleBondStereo:
    """Resuelve E/Z de un doble enlace a partir de los marcadores `/` `\\`."""
    options = options or StereoOptions()
    ends = (bond.a1, bond.a2)
    highs: List[Optional[int]] = []
    sides: List[Optional[int]] = []
    for end, partner in (ends, ends[::-1]):
        subs = [s for s in substituents_of(graph, end) if s != partner]
        if not subs or len(subs) > 2:
            return _indeterminate(bond, highs, f"atom {end} has {len(subs)} substituents")
        if len(subs) == 2:
            ranking = rank_substituents(graph, end, subs, options.priority)
            if not ranking.is_total:
                return _indeterminate(bond, highs, f"atom {end} carries two identical substituents")
            high = ranking.order[0]
        else:
            high = subs[0]
        highs.append(high)
        sides.append(_high_priority_side(graph, end, high, subs))

    if sides[0] is None or sides[1] is None:
        return _indeterminate(bond, highs, "no directional marker")
    label = DoubleBondLabel.Z if sides[0] == sides[1] else DoubleBondLabel.E
    return DoubleBondStereo(bond.index, ends, (highs[0], highs[1]), label)


def find_potential_stereocenters(graph: MoleculeGraph, options: Optional[StereoOptions] = None) -> List[int]:
    """Átomos sp3 con cuatro sustituyentes distintos, marcados o no."""
    options = options or StereoOptions()
    found: List[int] = []
    for atom in graph.atoms:
        if atom.aromatic:
            continue
        if any(b.order is not BondOrder.SINGLE for b in graph.bonds_of(atom.index)):
            continue
        subs = substituents_of(graph, atom.index)
        if len(subs) != 4 or subs.count(IMPLICIT_H) > 1:
            continue
        if rank_substituents(graph, atom.index, subs, options.priority).is_total:
            found.append(atom.index)
    return found


def _is_candidate_double_bond(graph: MoleculeGraph, bond: Bond) -> bool:
    if bond.order is not BondOrder.DOUBLE:
        return False
    a1, a2 = graph.atom(bond.a1), graph.atom(bond.a2)
    if set(a1.rings) & set(a2.rings):
        return False
    return len(substituents_of(graph, bond.a1)) > 1 and len(substituents_of(graph, bond.a2)) > 1


def _high_priority_side(graph: MoleculeGraph, end: int, high: int, subs: Sequence[int]) -> Optional[int]:
    """Lado (+1/-1) del sustituyente prioritario según el primer marcador."""
    for sub in subs:
        if sub == IMPLICIT_H:
            continue
        marked = graph.bond_between(end, sub)
        if marked is None or marked.direction is BondDirection.NONE:
            continue
        side = marked.direction.sign * (1 if marked.a1 == end else -1)
        return side if sub == high else -side
    return None


def _indeterminate(bond: Bond, highs: Sequence[Optional[int]], reason: str) -> DoubleBondStereo:
    padded = list(highs) + [None] * (2 - len(highs))
    return DoubleBondStereo(
        bond.index,
        (bond.a1, bond.a2),
        (padded[0], padded[1]),
        DoubleBondLabel.INDETERMINATE,
        reason,
    )


def _permutation_parity(reference: Sequence[int], target: Sequence[int]) -> bool:
    """True si `target` es una permutación impar de `reference`."""
    positions = [reference.index(item) for item in target]
    odd = False
    seen = [False] * len(positions)
    for start in range(len(positions)):
        if seen[start]:
            continue
        length = 0
        node = start
        while not seen[node]:
            seen[node] = True
            node = positions[node]
            length += 1
        if length % 2 == 0:
            odd = not odd
    return odd


def _describe(graph: MoleculeGraph, group: Sequence[int]) -> str:
    return "/".join("H" if idx == IMPLICIT_H else f"{graph.atom(idx).element}{idx}" for idx in group)
