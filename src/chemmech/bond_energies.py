"""Energías medias de disociación de enlace (kcal/mol) y claves canónicas."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from chemcore.model import BondOrder

logger = logging.getLogger(__name__)

BOND_ENERGIES: Mapping[str, float] = MappingProxyType({
    "C-H": 99,
    "C-C": 83,
    "C=C": 146,
    "C#C": 200,
    "C-O": 86,
    "C=O": 178,
    "C-N": 73,
    "C=N": 147,
    "C#N": 213,
    "C-F": 116,
    "C-Cl": 81,
    "C-Br": 68,
    "C-I": 51,
    "C-S": 65,
    "O-H": 110,
    "N-H": 93,
    "S-H": 82,
    "H-H": 104,
    "H-F": 136,
    "H-Cl": 103,
    "H-Br": 87,
    "H-I": 71,
})

# Energía usada para enlaces no tabulados.
DEFAULT_BOND_ENERGY = 80.0

# Orden de los elementos dentro de una clave ("C-H", "O-H", "H-Br").
ELEMENT_KEY_ORDER = ("C", "N", "O", "S", "H", "F", "Cl", "Br", "I")


def bond_key(element_1: str, element_2: str, order: BondOrder = BondOrder.SINGLE) -> str:
    """Clave canónica de un tipo de enlace, p. ej. `bond_key("Br", "C")` -> "C-Br"."""
    first, second = sorted((element_1, element_2), key=_element_rank)
    return f"{first}{order.symbol}{second}"


def bond_energy(key: str) -> float:
    """Energía tabulada del enlace o `DEFAULT_BOND_ENERGY` si no existe."""
    energy = BOND_ENERGIES.get(key)
    if energy is None:
        logger.warning("No bond energy for %s, using %.0f kcal/mol", key, DEFAULT_BOND_ENERGY)
        return DEFAULT_BOND_ENERGY
    return float(energy)


def total_energy(keys: Iterable[str]) -> float:
    return sum(bond_energy(key) for key in keys)


def _element_rank(element: str):
    if element in ELEMENT_KEY_ORDER:
        return (0, ELEMENT_KEY_ORDER.index(element), element)
    return (1, 0, element)
