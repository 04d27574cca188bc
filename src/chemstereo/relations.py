"""Relación estereoisomérica entre dos moléculas ya leídas.

Los centros se emparejan por su entorno (elemento + claves de esferas de sus
sustituyentes), no por índice de lectura, de modo que dos notaciones escritas
en distinto orden se comparan correctamente. Los centros equivalentes se
agrupan en la misma clave, así que la imagen especular de un compuesto meso
coincide consigo misma y se informa como idéntica; `is_meso` lo detecta.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Optional, Tuple

from chemcalc.formula import molecular_formula
from chemcore.model import MoleculeGraph
from chemcore.options import StereoOptions

from .descriptors import DoubleBondLabel, StereoAssignment, StereoLabel, assign_stereo
from .priority import sphere_key, substituents_of


class StereoRelationship(str, Enum):
    IDENTICAL = "identical"
    ENANTIOMERS = "enantiomers"
    DIASTEREOMERS = "diastereomers"
    NOT_STEREOISOMERS = "not_stereoisomers"


def stereoisomer_relationship(
    first: MoleculeGraph,
    second: MoleculeGraph,
    options: Optional[StereoOptions] = None,
) -> StereoRelationship:
    """Compara constitución y descriptores de dos grafos resueltos.

    Returns:
        `NOT_STEREOISOMERS` si la constitución difiere o los centros no se
        corresponden; en otro caso idéntico, enantiómeros o diastereómeros.
    """
    options = options or StereoOptions()
    if constitution(first) != constitution(second):
        return StereoRelationship.NOT_STEREOISOMERS

    labels_1 = _environment_labels(first, assign_stereo(first, options), options)
    labels_2 = _environment_labels(second, assign_stereo(second, options), options)
    if set(labels_1) != set(labels_2):
        return StereoRelationship.NOT_STEREOISOMERS

    center_keys = [key for key in labels_1 if key[0] == "center"]
    bond_keys = [key for key in labels_1 if key[0] == "double_bond"]
    inverted = sum(1 for key in center_keys if labels_1[key] != labels_2[key])
    bonds_changed = any(labels_1[key] != labels_2[key] for key in bond_keys)

    if not inverted and not bonds_changed:
        return StereoRelationship.IDENTICAL
    if center_keys and inverted == len(center_keys) and not bonds_changed:
        if all(_mirror(labels_1[key]) == labels_2[key] for key in center_keys):
            return StereoRelationship.ENANTIOMERS
    return StereoRelationship.DIASTEREOMERS


def is_meso(graph: MoleculeGraph, options: Optional[StereoOptions] = None) -> bool:
    """Indica si la molécula es meso.

    Un compuesto meso tiene al menos dos estereocentros y coincide con su
    imagen especular: invertir todos los descriptores R/S deja igual cada
    grupo de centros equivalentes.

    Args:
        graph: Grafo molecular resuelto.
        options: Opciones del asignador; por defecto `StereoOptions()`.

    Returns:
        True si hay dos o más centros y la molécula es aquiral.
    """
    options = options or StereoOptions()
    labels = _environment_labels(graph, assign_stereo(graph, options), options)
    centers = {key: value for key, value in labels.items() if key[0] == "center"}
    if sum(len(value) for value in centers.values()) < 2:
        return False
    return all(_mirror(value) == value for value in centers.values())


def constitution(graph: MoleculeGraph) -> Tuple:
    """Huella de conectividad: fórmula más multiconjunto de enlaces."""
    formula = tuple(sorted(molecular_formula(graph).items()))
    bonds = Counter()
    for bond in graph.bonds:
        pair = tuple(sorted((graph.atom(bond.a1).element, graph.atom(bond.a2).element)))
        bonds[(pair, bond.order.symbol)] += 1
    degrees = Counter(
        (atom.element, graph.degree(atom.index), atom.hydrogen_count) for atom in graph.atoms
    )
    return formula, tuple(sorted(bonds.items())), tuple(sorted(degrees.items()))


def _environment_labels(
    graph: MoleculeGraph,
    assignment: StereoAssignment,
    options: StereoOptions,
) -> Dict[Tuple, Tuple[str, ...]]:
    """Etiquetas agrupadas por entorno; centros equivalentes comparten clave."""
    depth = options.priority.max_spheres
    grouped: Dict[Tuple, list] = {}
    for center in assignment.centers:
        if not center.is_stereocenter:
            continue
        keys = sorted(
            sphere_key(graph, center.atom_index, sub, depth)
            for sub in substituents_of(graph, center.atom_index)
        )
        key = ("center", graph.atom(center.atom_index).element, tuple(keys))
        grouped.setdefault(key, []).append(center.label.value)
    for record in assignment.double_bonds:
        if record.label is DoubleBondLabel.INDETERMINATE:
            continue
        ends = sorted(
            tuple(sorted(sphere_key(graph, end, sub, depth) for sub in substituents_of(graph, end)))
            for end in record.atoms
        )
        grouped.setdefault(("double_bond", tuple(ends)), []).append(record.label.value)
    return {key: tuple(sorted(values)) for key, values in grouped.items()}


def _mirror(labels: Tuple[str, ...]) -> Tuple[str, ...]:
    swap = {StereoLabel.R.value: StereoLabel.S.value, StereoLabel.S.value: StereoLabel.R.value}
    return tuple(sorted(swap.get(label, label) for label in labels))
