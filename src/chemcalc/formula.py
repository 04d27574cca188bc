"""Cálculo y formateo de fórmulas moleculares.

Este módulo cuenta elementos a partir de un `MoleculeGraph` resuelto y
formatea la fórmula siguiendo el orden de Hill. También calcula la diferencia
de fórmulas entre reactivo y producto, usada por el motor de mecanismos.
"""

from __future__ import annotations

from typing import Dict

from chemcore.model import MoleculeGraph


def molecular_formula(graph: MoleculeGraph) -> Dict[str, int]:
    """Calcula la fórmula molecular como diccionario de elemento -> conteo.

    Args:
        graph: Grafo molecular con hidrógenos ya resueltos.

    Returns:
        Diccionario con símbolos atómicos y sus cantidades totales.

    Side Effects:
        No tiene efectos laterales; solo calcula y devuelve datos.
    """
    counts: Dict[str, int] = {}

    for atom in graph.atoms:
        counts[atom.element] = counts.get(atom.element, 0) + 1
        hydrogens = atom.hydrogen_count
        if hydrogens:
            counts["H"] = counts.get("H", 0) + int(hydrogens)

    return {element: count for element, count in counts.items() if count > 0}


def formula_difference(reactant: MoleculeGraph, product: MoleculeGraph) -> Dict[str, int]:
    """Devuelve `producto - reactivo` por elemento, omitiendo ceros.

    Un valor positivo indica átomos ganados; uno negativo, átomos perdidos.
    """
    before = molecular_formula(reactant)
    after = molecular_formula(product)
    delta: Dict[str, int] = {}
    for element in set(before) | set(after):
        change = after.get(element, 0) - before.get(element, 0)
        if change:
            delta[element] = change
    return delta


def format_formula(formula_dict: Dict[str, int]) -> str:
    """Formatea una fórmula usando el orden de Hill (C, H, luego alfabético).

    Args:
        formula_dict: Diccionario con símbolos de elementos y cantidades.

    Returns:
        Cadena con la fórmula formateada (p. ej., "C6H6O").
    """
    if not formula_dict:
        return ""
    order = []
    if "C" in formula_dict:
        order.append("C")
        if "H" in formula_dict:
            order.append("H")
    for element in sorted(e for e in formula_dict.keys() if e not in order):
        order.append(element)

    parts = []
    for element in order:
        count = formula_dict.get(element, 0)
        if count <= 0:
            continue
        parts.append(element if count == 1 else f"{element}{count}")
    return "".join(parts)
