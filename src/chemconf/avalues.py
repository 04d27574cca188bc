"""Tabla de valores A y clasificación de sustituyentes a partir del grafo."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Set

from chemcore.model import BondOrder, MoleculeGraph

logger = logging.getLogger(__name__)

# Penalización axial frente a ecuatorial en kcal/mol.
A_VALUES: Mapping[str, float] = MappingProxyType({
    "H": 0.0,
    "D": 0.006,
    "F": 0.15,
    "Cl": 0.43,
    "Br": 0.38,
    "I": 0.43,
    "OH": 0.87,
    "OCH3": 0.60,
    "OAc": 0.60,
    "NH2": 1.23,
    "NMe2": 1.50,
    "CH3": 1.74,
    "C2H5": 1.79,
    "iPr": 2.15,
    "tBu": 4.90,
    "Ph": 2.80,
    "CN": 0.17,
    "NO2": 1.10,
    "COOH": 1.35,
    "COOMe": 1.25,
    "CHO": 0.56,
})


def a_value(group: Optional[str]) -> Optional[float]:
    """Valor A del grupo, o None si no está tabulado."""
    if group is None:
        return None
    return A_VALUES.get(group)


def classify_substituent(graph: MoleculeGraph, ring_atom: int, attached: int) -> Optional[str]:
    """Identifica el grupo tabulado unido a `ring_atom` a través de `attached`.

    Args:
        graph: Grafo resuelto.
        ring_atom: Átomo del anillo que porta el sustituyente.
        attached: Primer átomo del sustituyente.

    Returns:
        Nombre del grupo en `A_VALUES`, o None si no se reconoce.
    """
    atom = graph.atom(attached)
    element = atom.element
    others = [nbr for nbr in graph.neighbors(attached) if nbr != ring_atom]

    group: Optional[str] = None
    if element == "H":
        group = "D" if atom.isotope == 2 else "H"
    elif element in ("F", "Cl", "Br", "I") and not others:
        group = element
    elif element == "O":
        group = _classify_oxygen(graph, attached, others)
    elif element == "N":
        group = _classify_nitrogen(graph, attached, others)
    elif element == "C":
        group = _classify_carbon(graph, ring_atom, attached, others)

    if group is None:
        logger.warning("No A-value group for substituent at atom %d (%s)", attached, element)
    return group


def _classify_oxygen(graph: MoleculeGraph, oxygen: int, others: List[int]) -> Optional[str]:
    if not others:
        return "OH" if graph.atom(oxygen).hydrogen_count == 1 else None
    if len(others) != 1:
        return None
    carbon = others[0]
    if _is_methyl(graph, carbon):
        return "OCH3"
    rest = [nbr for nbr in graph.neighbors(carbon) if nbr != oxygen]
    if _has_carbonyl(graph, carbon) and any(_is_methyl(graph, nbr) for nbr in rest):
        return "OAc"
    return None


def _classify_nitrogen(graph: MoleculeGraph, nitrogen: int, others: List[int]) -> Optional[str]:
    atom = graph.atom(nitrogen)
    if not others:
        return "NH2" if atom.hydrogen_count == 2 else None
    if len(others) == 2 and all(_is_methyl(graph, nbr) for nbr in others):
        return "NMe2"
    if len(others) == 2 and all(graph.atom(nbr).element == "O" for nbr in others):
        return "NO2"
    return None


def _classify_carbon(graph: MoleculeGraph, ring_atom: int, carbon: int, others: List[int]) -> Optional[str]:
    atom = graph.atom(carbon)
    if atom.aromatic:
        branch = _branch_atoms(graph, ring_atom, carbon)
        if len(branch) == 6 and all(
            graph.atom(idx).element == "C" and graph.atom(idx).aromatic for idx in branch
        ):
            return "Ph"
        return None

    for nbr in others:
        bond = graph.bond_between(carbon, nbr)
        if bond.order is BondOrder.TRIPLE and graph.atom(nbr).element == "N":
            return "CN"

    if _has_carbonyl(graph, carbon):
        singles = [nbr for nbr in others if graph.bond_between(carbon, nbr).order is BondOrder.SINGLE]
        if not singles and atom.hydrogen_count == 1:
            return "CHO"
        if len(singles) == 1 and graph.atom(singles[0]).element == "O":
            oxygen = singles[0]
            beyond = [nbr for nbr in graph.neighbors(oxygen) if nbr != carbon]
            if not beyond and graph.atom(oxygen).hydrogen_count == 1:
                return "COOH"
            if len(beyond) == 1 and _is_methyl(graph, beyond[0]):
                return "COOMe"
        return None

    if any(graph.bond_between(carbon, nbr).order is not BondOrder.SINGLE for nbr in others):
        return None
    if any(graph.atom(nbr).element != "C" for nbr in others):
        return None
    methyls = sum(1 for nbr in others if _is_methyl(graph, nbr))
    if not others and atom.hydrogen_count == 3:
        return "CH3"
    if len(others) == 1 and methyls == 1 and atom.hydrogen_count == 2:
        return "C2H5"
    if len(others) == 2 and methyls == 2 and atom.hydrogen_count == 1:
        return "iPr"
    if len(others) == 3 and methyls == 3:
        return "tBu"
    return None


def _is_methyl(graph: MoleculeGraph, atom_index: int) -> bool:
    atom = graph.atom(atom_index)
    return atom.element == "C" and not atom.aromatic and graph.degree(atom_index) == 1 and atom.hydrogen_count == 3


def _has_carbonyl(graph: MoleculeGraph, carbon: int) -> bool:
    return any(
        bond.order is BondOrder.DOUBLE and graph.atom(bond.other(carbon)).element == "O"
        for bond in graph.bonds_of(carbon)
    )


def _branch_atoms(graph: MoleculeGraph, ring_atom: int, start: int) -> Set[int]:
    seen = {start}
    stack = [start]
    while stack:
        node = stack.pop()
        for nbr in graph.neighbors(node):
            if nbr == ring_atom or nbr in seen:
                continue
            seen.add(nbr)
            stack.append(nbr)
    return seen
