"""Percepción de anillos sobre el grafo molecular."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Dict, FrozenSet, Iterable, List, Optional

from chemcore.model import MoleculeGraph

Ring = FrozenSet[int]


def find_rings(graph: MoleculeGraph) -> List[Ring]:
    """Encuentra el anillo más pequeño que cierra cada enlace.

    Para cada enlace, el camino más corto entre sus átomos que no usa el propio
    enlace cierra un anillo. En sistemas fusionados solo se obtiene un anillo
    mínimo por enlace.

    Args:
        graph: Grafo molecular resuelto.

    Returns:
        Anillos ordenados por tamaño y luego por índices de átomo.
    """
    found: Dict[Ring, None] = {}
    for bond in graph.bonds:
        path = _bypass_path(graph, bond.a1, bond.a2)
        if len(path) >= 3:
            found.setdefault(frozenset(path), None)
    return sorted(found, key=lambda ring: (len(ring), sorted(ring)))


def is_simple_ring(graph: MoleculeGraph, ring_nodes: Iterable[int]) -> bool:
    """Indica si cada átomo tiene exactamente dos vecinos dentro del anillo."""
    members = set(ring_nodes)
    return len(members) >= 3 and all(
        sum(1 for nbr in graph.neighbors(atom_id) if nbr in members) == 2
        for atom_id in members
    )


def ring_order(graph: MoleculeGraph, ring_nodes: Iterable[int]) -> List[int]:
    """Recorre un anillo simple desde su menor índice hacia el vecino menor.

    Returns:
        Átomos en orden cíclico, o lista vacía si no forman un ciclo simple.
    """
    members = set(ring_nodes)
    if not is_simple_ring(graph, members):
        return []
    inside = {atom_id: sorted(n for n in graph.neighbors(atom_id) if n in members) for atom_id in members}
    start = min(members)
    walk = [start]
    previous, current = start, inside[start][0]
    while current != start:
        walk.append(current)
        first, second = inside[current]
        previous, current = current, (second if first == previous else first)
        if len(walk) > len(members):
            return []
    return walk if len(walk) == len(members) else []


def annotate_rings(graph: MoleculeGraph, rings: Optional[List[Ring]] = None) -> MoleculeGraph:
    """Devuelve una copia del grafo cuyos átomos llevan sus ids de anillo.

    Args:
        graph: Grafo molecular.
        rings: Anillos ya calculados; por defecto `find_rings(graph)`.

    Returns:
        Grafo nuevo; el id de anillo es su posición en `rings`.
    """
    if rings is None:
        rings = find_rings(graph)
    if not rings:
        return graph
    membership: Dict[int, List[int]] = {}
    for ring_id, ring in enumerate(rings):
        for atom_id in ring:
            membership.setdefault(atom_id, []).append(ring_id)
    atoms = [
        replace(atom, rings=tuple(membership[atom.index])) if atom.index in membership else atom
        for atom in graph.atoms
    ]
    return graph.with_atoms(atoms)


def _bypass_path(graph: MoleculeGraph, start: int, goal: int) -> List[int]:
    """Camino en anchura de `start` a `goal` que evita su enlace directo."""
    came_from: Dict[int, int] = {start: start}
    queue = deque([start])
    while queue and goal not in came_from:
        node = queue.popleft()
        for nbr in graph.neighbors(node):
            if nbr in came_from or {node, nbr} == {start, goal}:
                continue
            came_from[nbr] = node
            queue.append(nbr)
    if goal not in came_from:
        return []
    path = [goal]
    while path[-1] != start:
        path.append(came_from[path[-1]])
    return path[::-1]
