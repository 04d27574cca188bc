"""Cálculo de hidrógenos implícitos según valencias estándar.

Los átomos escritos sin corchetes reciben los hidrógenos que faltan hasta la
menor valencia estándar compatible con sus enlaces. Los átomos entre
corchetes usan exclusivamente su recuento explícito de H.

Aproximación documentada: los enlaces aromáticos cuentan 1.5 y la suma se
trunca por átomo; los heteroátomos aromáticos divalentes (o, s) cuentan cada
enlace aromático como 1.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from types import MappingProxyType
from typing import List, Mapping, Tuple

from chemcore.errors import ValenceViolation
from chemcore.model import Atom, BondOrder, MoleculeGraph

logger = logging.getLogger(__name__)

# Valencias estándar por elemento, de menor a mayor.
STANDARD_VALENCES: Mapping[str, Tuple[int, ...]] = MappingProxyType({
    "B": (3,),
    "C": (4,),
    "N": (3, 5),
    "O": (2,),
    "P": (3, 5),
    "S": (2, 4, 6),
    "F": (1,),
    "Cl": (1,),
    "Br": (1,),
    "I": (1,),
})

# Valencias máximas (suma de órdenes + H) para átomos entre corchetes; la
# carga formal amplía el umbral en |carga|.
MAX_VALENCE: Mapping[str, int] = MappingProxyType({
    "H": 1,
    "B": 4,
    "C": 4,
    "N": 4,
    "O": 3,
    "F": 1,
    "Cl": 7,
    "Br": 7,
    "I": 7,
    "P": 6,
    "S": 6,
    "Se": 6,
    "Te": 6,
    "As": 6,
    "Sb": 6,
    "Si": 6,
    "Ge": 6,
    "Sn": 6,
    "Xe": 8,
})

_AROMATIC_DIVALENT = frozenset({"O", "S", "Se"})


def bond_valence_sum(graph: MoleculeGraph, atom_index: int) -> int:
    """Suma de órdenes de enlace truncada usada por el resolvedor.

    Args:
        graph: Grafo molecular.
        atom_index: Índice del átomo a evaluar.

    Returns:
        Suma entera de órdenes de enlace del átomo.
    """
    atom = graph.atom(atom_index)
    total = 0.0
    for bond in graph.bonds_of(atom_index):
        if bond.order is BondOrder.AROMATIC and atom.element in _AROMATIC_DIVALENT:
            total += 1.0
        else:
            total += bond.order.valence
    return int(math.floor(total))


def implicit_h_count(graph: MoleculeGraph, atom_index: int) -> int:
    """Calcula los hidrógenos implícitos para un átomo.

    Args:
        graph: Grafo molecular (crudo o ya resuelto).
        atom_index: Índice del átomo a evaluar.

    Returns:
        Número de H implícitos (>= 0). Siempre 0 para átomos entre corchetes.

    Raises:
        ValenceViolation: Si la suma de enlaces supera toda valencia estándar
            del elemento.

    Side Effects:
        No tiene efectos laterales.
    """
    atom = graph.atom(atom_index)
    if atom.bracket:
        return 0
    allowed = STANDARD_VALENCES.get(atom.element)
    if allowed is None:
        return 0
    used = bond_valence_sum(graph, atom_index)
    for valence in allowed:
        if valence >= used:
            return valence - used
    raise ValenceViolation(
        f"{atom.element} atom {atom_index} has bond order sum {used}, "
        f"above every allowed valence {allowed}",
        position=atom.position,
        atom_index=atom_index,
    )


def resolve_hydrogens(graph: MoleculeGraph) -> MoleculeGraph:
    """Devuelve una copia del grafo con `implicit_h` completado.

    Raises:
        ValenceViolation: Átomo sin corchetes con valencia excedida o átomo
            entre corchetes por encima de `MAX_VALENCE`.
    """
    atoms: List[Atom] = []
    for atom in graph.atoms:
        if atom.bracket:
            _check_bracket_atom(graph, atom)
            atoms.append(atom)
            continue
        hydrogens = implicit_h_count(graph, atom.index)
        atoms.append(_with_implicit_h(atom, hydrogens))
    logger.debug("Resolved implicit hydrogens: %s", [atom.implicit_h for atom in atoms])
    return graph.with_atoms(atoms)


def check_valence(graph: MoleculeGraph) -> None:
    """Reverifica el invariante de valencia sobre un grafo resuelto.

    Raises:
        ValenceViolation: En el primer átomo que no cumple el invariante.
    """
    for atom in graph.atoms:
        if atom.bracket:
            _check_bracket_atom(graph, atom)
            continue
        allowed = STANDARD_VALENCES.get(atom.element)
        if allowed is None:
            continue
        total = bond_valence_sum(graph, atom.index) + atom.implicit_h
        if total not in allowed:
            raise ValenceViolation(
                f"{atom.element} atom {atom.index} has valence {total}, expected one of {allowed}",
                position=atom.position,
                atom_index=atom.index,
            )


def _check_bracket_atom(graph: MoleculeGraph, atom: Atom) -> None:
    limit = MAX_VALENCE.get(atom.element)
    if limit is None:
        return
    total = bond_valence_sum(graph, atom.index) + (atom.explicit_h or 0)
    if total > limit + abs(atom.charge):
        raise ValenceViolation(
            f"[{atom.element}] atom {atom.index} has valence {total}, maximum is {limit + abs(atom.charge)}",
            position=atom.position,
            atom_index=atom.index,
        )


def _with_implicit_h(atom: Atom, hydrogens: int) -> Atom:
    if atom.implicit_h == hydrogens:
        return atom
    return replace(atom, implicit_h=hydrogens)
