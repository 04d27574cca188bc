"""Clasificador de prioridades tipo CIP por expansión de esferas.

Simplificación explícita de las reglas CIP: cada enlace múltiple añade
`orden - 1` átomos fantasma del elemento del vecino (sin sustituyentes
propios, una esfera de profundidad) y un átomo aromático recibe un único
fantasma de su primer vecino aromático. Las esferas se comparan como listas
de números atómicos ordenadas de mayor a menor y rellenadas con ceros.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from chemcore.model import IMPLICIT_H, BondOrder, MoleculeGraph
from chemcore.options import PriorityOptions

logger = logging.getLogger(__name__)

SphereKey = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class PriorityRanking:
    """Resultado del clasificador para un centro.

    Attributes:
        center: Índice del átomo central.
        order: Sustituyentes de mayor a menor prioridad (`IMPLICIT_H` = H).
        groups: Grupos de empate, de mayor a menor prioridad.
        keys: Clave de esferas de cada grupo, alineada con `groups`.
    """
    center: int
    order: Tuple[int, ...]
    groups: Tuple[Tuple[int, ...], ...]
    keys: Tuple[SphereKey, ...]

    @property
    def is_total(self) -> bool:
        """True si no hay empates entre sustituyentes."""
        return all(len(group) == 1 for group in self.groups)

    def rank_of(self, substituent: int) -> int:
        """Posición (0 = mayor prioridad) del grupo que contiene al sustituyente."""
        for rank, group in enumerate(self.groups):
            if substituent in group:
                return rank
        raise ValueError(f"{substituent} is not ranked around atom {self.center}")

    def tied_groups(self) -> List[Tuple[int, ...]]:
        return [group for group in self.groups if len(group) > 1]


def substituents_of(graph: MoleculeGraph, atom_index: int) -> List[int]:
    """Sustituyentes del átomo en orden de lectura, hidrógenos incluidos.

    Los H de un átomo entre corchetes ocupan su posición de lectura; los H
    implícitos de un átomo sin corchetes van al final.
    """
    atom = graph.atom(atom_index)
    if atom.neighbor_order:
        ordered = list(atom.neighbor_order)
        missing_h = atom.hydrogen_count - ordered.count(IMPLICIT_H)
    else:
        ordered = graph.neighbors(atom_index)
        missing_h = atom.hydrogen_count
    ordered.extend([IMPLICIT_H] * max(missing_h, 0))
    return ordered


def sphere_key(
    graph: MoleculeGraph,
    center: int,
    substituent: int,
    max_spheres: int = 4,
) -> SphereKey:
    """Calcula las esferas de números atómicos de un sustituyente sin rellenar.

    Args:
        graph: Grafo con hidrógenos resueltos.
        center: Átomo desde el que se mira (no se vuelve a él).
        substituent: Átomo directamente unido, o `IMPLICIT_H`.
        max_spheres: Número de esferas a generar (incluida la primera).

    Returns:
        Tupla de esferas; cada esfera es una tupla ordenada descendente.
    """
    if substituent == IMPLICIT_H:
        return ((1,),) + tuple(() for _ in range(max_spheres - 1))

    spheres: List[Tuple[int, ...]] = [(graph.atom(substituent).atomic_number,)]
    frontier: List[Tuple[int, int]] = [(substituent, center)]
    for _ in range(max_spheres - 1):
        numbers: List[int] = []
        next_frontier: List[Tuple[int, int]] = []
        for atom_index, parent in frontier:
            numbers.extend(_phantom_numbers(graph, atom_index))
            for bond in graph.bonds_of(atom_index):
                nbr = bond.other(atom_index)
                if nbr == parent:
                    continue
                numbers.append(graph.atom(nbr).atomic_number)
                next_frontier.append((nbr, atom_index))
            numbers.extend([1] * graph.atom(atom_index).hydrogen_count)
        spheres.append(tuple(sorted(numbers, reverse=True)))
        frontier = next_frontier
    return tuple(spheres)


def rank_substituents(
    graph: MoleculeGraph,
    center: int,
    candidates: Optional[Sequence[int]] = None,
    options: Optional[PriorityOptions] = None,
) -> PriorityRanking:
    """Ordena los sustituyentes de `center` por prioridad decreciente.

    Args:
        graph: Grafo con hidrógenos resueltos.
        center: Átomo estereogénico o extremo de un doble enlace.
        candidates: Sustituyentes a comparar; por defecto `substituents_of`.
        options: Profundidad de comparación.

    Returns:
        `PriorityRanking` con orden y grupos de empate. Los candidatos que no
        se distinguen dentro de `max_spheres` quedan en el mismo grupo.
    """
    options = options or PriorityOptions()
    if candidates is None:
        candidates = substituents_of(graph, center)
    raw: Dict[int, SphereKey] = {}
    keyed: List[Tuple[SphereKey, int]] = []
    for position, candidate in enumerate(candidates):
        if candidate not in raw:
            raw[candidate] = sphere_key(graph, center, candidate, options.max_spheres)
        keyed.append((raw[candidate], position))

    widths = [
        max((len(key[sphere]) for key, _ in keyed), default=0)
        for sphere in range(options.max_spheres)
    ]
    padded = [(_pad(key, widths), position) for key, position in keyed]
    padded.sort(key=lambda item: (item[0], -item[1]), reverse=True)

    groups: List[List[int]] = []
    group_keys: List[SphereKey] = []
    for key, position in padded:
        candidate = candidates[position]
        if group_keys and group_keys[-1] == key:
            groups[-1].append(candidate)
        else:
            groups.append([candidate])
            group_keys.append(key)

    ranking = PriorityRanking(
        center=center,
        order=tuple(candidates[position] for _, position in padded),
        groups=tuple(tuple(group) for group in groups),
        keys=tuple(group_keys),
    )
    logger.debug("Ranked substituents of atom %d: %s", center, ranking.groups)
    return ranking


def _phantom_numbers(graph: MoleculeGraph, atom_index: int) -> List[int]:
    atom = graph.atom(atom_index)
    numbers: List[int] = []
    first_aromatic: Optional[int] = None
    for bond in graph.bonds_of(atom_index):
        other = graph.atom(bond.other(atom_index))
        if bond.order is BondOrder.AROMATIC:
            if first_aromatic is None:
                first_aromatic = other.atomic_number
            continue
        numbers.extend([other.atomic_number] * (bond.order.multiplicity - 1))
    if atom.aromatic and first_aromatic is not None:
        numbers.append(first_aromatic)
    return numbers


def _pad(key: SphereKey, widths: Sequence[int]) -> SphereKey:
    return tuple(
        sphere + (0,) * (width - len(sphere))
        for sphere, width in zip(key, widths)
    )
