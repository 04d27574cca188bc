"""Clasificación de una reacción por diferencia de grafos reactivo/producto.

Se comparan los multiconjuntos de tipos de enlace (incluidos los enlaces X-H
implícitos). Los cambios en el número de átomos, obtenidos de la fórmula, se
compensan descartando enlaces internos a los átomos ganados o perdidos y
añadiendo los enlaces de reactivo (H-H, H-X, X-X) o subproducto (H-X)
implicados. ΔH = Σ(energías rotas) - Σ(energías formadas).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple

from chemcalc.formula import formula_difference
from chemcore.model import BondOrder, MoleculeGraph

from .bond_energies import bond_key, total_energy
from .substrate import SubstrateProfile, infer_conditions_from_graph
from .tables import SubstrateClass

logger = logging.getLogger(__name__)

HALOGENS = ("F", "Cl", "Br", "I")

# Ea base (kcal/mol) por mecanismo antes del ajuste de Hammond.
BASE_ACTIVATION: Mapping[str, float] = MappingProxyType({
    "SN2": 18.0,
    "SN1": 22.0,
    "E2": 20.0,
    "E1": 22.0,
    "hydrogenation": 12.0,
    "addition": 15.0,
    "unknown": 15.0,
})
DEFAULT_ACTIVATION = 20.0
MIN_ACTIVATION = 5.0


class ReactionType(str, Enum):
    SUBSTITUTION = "substitution"
    ELIMINATION = "elimination"
    ADDITION = "addition"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ReactionAnalysis:
    """Resultado de `predict_from_graphs`.

    Attributes:
        reaction_type: Sustitución, eliminación, adición o desconocida.
        sub_type: Subtipo legible (p. ej., "SN2", "E2", "hydrogenation").
        mechanism: Clave usada para la Ea base.
        bonds_broken: Claves de enlace rotas, ordenadas.
        bonds_formed: Claves de enlace formadas, ordenadas.
        estimated_delta_h: ΔH estimada en kcal/mol.
        estimated_ea: Ea estimada en kcal/mol (postulado de Hammond).
        confidence: "medium" si se clasificó, "low" si no.
        formula_change: Átomos ganados (+) o perdidos (-) por elemento.
        substrate: Perfil del sustrato del reactivo, si tiene grupo saliente.
    """
    reaction_type: ReactionType
    sub_type: str
    mechanism: str
    bonds_broken: Tuple[str, ...]
    bonds_formed: Tuple[str, ...]
    estimated_delta_h: float
    estimated_ea: float
    confidence: str
    formula_change: Dict[str, int] = field(default_factory=dict)
    substrate: Optional[SubstrateProfile] = None

    @property
    def bonds_changed(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        return self.bonds_broken, self.bonds_formed


def bond_multiset(graph: MoleculeGraph) -> Counter:
    """Cuenta tipos de enlace del grafo, incluyendo los X-H implícitos."""
    counts: Counter = Counter()
    for bond in graph.bonds:
        counts[bond_key(graph.atom(bond.a1).element, graph.atom(bond.a2).element, bond.order)] += 1
    for atom in graph.atoms:
        if atom.hydrogen_count and atom.element != "H":
            counts[bond_key(atom.element, "H")] += atom.hydrogen_count
    return counts


def pi_bond_count(graph: MoleculeGraph) -> int:
    return sum(
        bond.order.multiplicity - 1
        for bond in graph.bonds
        if bond.order is not BondOrder.AROMATIC
    )


def predict_from_graphs(reactant: MoleculeGraph, product: MoleculeGraph) -> ReactionAnalysis:
    """Clasifica la reacción y estima ΔH y Ea a partir de dos grafos resueltos.

    Args:
        reactant: Grafo del reactivo orgánico.
        product: Grafo del producto orgánico.

    Returns:
        `ReactionAnalysis` con enlaces rotos/formados y termodinámica.
    """
    before = bond_multiset(reactant)
    after = bond_multiset(product)
    broken = before - after
    formed = after - before

    change = formula_difference(reactant, product)
    gained = {element for element, delta in change.items() if delta > 0}
    lost = {element for element, delta in change.items() if delta < 0}
    formed = _drop_internal(formed, gained)
    broken = _drop_internal(broken, lost)
    _add_reagent_bonds(broken, change)
    _add_byproduct_bonds(formed, change)

    broken_keys = tuple(sorted(broken.elements()))
    formed_keys = tuple(sorted(formed.elements()))
    delta_h = total_energy(broken_keys) - total_energy(formed_keys)

    profile = infer_conditions_from_graph(reactant)
    pi_change = pi_bond_count(product) - pi_bond_count(reactant)
    reaction_type = _classify(broken_keys, formed_keys, pi_change)
    sub_type, mechanism = _sub_type(reaction_type, profile, change)

    ea = BASE_ACTIVATION.get(mechanism, DEFAULT_ACTIVATION)
    if delta_h < -20:
        ea -= 3.0
    elif delta_h > 10:
        ea += 5.0
    ea = max(MIN_ACTIVATION, ea)

    analysis = ReactionAnalysis(
        reaction_type=reaction_type,
        sub_type=sub_type,
        mechanism=mechanism,
        bonds_broken=broken_keys,
        bonds_formed=formed_keys,
        estimated_delta_h=round(delta_h, 2),
        estimated_ea=ea,
        confidence="low" if reaction_type is ReactionType.UNKNOWN else "medium",
        formula_change=dict(change),
        substrate=profile,
    )
    logger.debug(
        "%s -> %s: %s (%s), broken=%s formed=%s dH=%.1f",
        reactant.notation,
        product.notation,
        reaction_type.value,
        sub_type,
        broken_keys,
        formed_keys,
        delta_h,
    )
    return analysis


def _split_key(key: str) -> Tuple[str, str]:
    for symbol in ("-", "=", "#", ":"):
        if symbol in key:
            first, second = key.split(symbol, 1)
            return first, second
    raise ValueError(f"Malformed bond key {key!r}")


def _drop_internal(bonds: Counter, elements: Set[str]) -> Counter:
    kept: Counter = Counter()
    for key, count in bonds.items():
        first, second = _split_key(key)
        if first in elements and second in elements:
            continue
        kept[key] = count
    return kept


def _add_reagent_bonds(broken: Counter, change: Mapping[str, int]) -> None:
    hydrogens = change.get("H", 0)
    halogens = [x for x in HALOGENS if change.get(x, 0) > 0]
    if hydrogens >= 2 and not halogens and len(change) == 1:
        broken[bond_key("H", "H")] += hydrogens // 2
    elif hydrogens > 0 and halogens:
        broken[bond_key("H", halogens[0])] += min(hydrogens, change[halogens[0]])
    elif not hydrogens and halogens and change[halogens[0]] >= 2:
        broken[bond_key(halogens[0], halogens[0])] += change[halogens[0]] // 2


def _add_byproduct_bonds(formed: Counter, change: Mapping[str, int]) -> None:
    hydrogens = -change.get("H", 0)
    halogens = [x for x in HALOGENS if change.get(x, 0) < 0]
    if hydrogens > 0 and halogens:
        formed[bond_key("H", halogens[0])] += min(hydrogens, -change[halogens[0]])


def _is_carbon_hetero(key: str) -> bool:
    first, second = _split_key(key)
    return first == "C" and second not in ("C", "H")


def _classify(broken: Tuple[str, ...], formed: Tuple[str, ...], pi_change: int) -> ReactionType:
    if pi_change > 0:
        return ReactionType.ELIMINATION
    if pi_change < 0:
        return ReactionType.ADDITION
    lost_hetero = [key for key in broken if _is_carbon_hetero(key)]
    new_hetero = [key for key in formed if _is_carbon_hetero(key)]
    if lost_hetero and new_hetero:
        return ReactionType.SUBSTITUTION
    return ReactionType.UNKNOWN


_UNIMOLECULAR = (SubstrateClass.TERTIARY, SubstrateClass.ALLYLIC, SubstrateClass.BENZYLIC)


def _sub_type(
    reaction_type: ReactionType,
    profile: Optional[SubstrateProfile],
    change: Mapping[str, int],
) -> Tuple[str, str]:
    substrate = profile.substrate if profile is not None else None
    if reaction_type is ReactionType.SUBSTITUTION:
        if substrate in _UNIMOLECULAR:
            return "SN1", "SN1"
        if substrate in (SubstrateClass.METHYL, SubstrateClass.PRIMARY):
            return "SN2", "SN2"
        if substrate is SubstrateClass.SECONDARY:
            return "SN1/SN2", "SN2"
        return "substitution", "unknown"
    if reaction_type is ReactionType.ELIMINATION:
        if substrate is SubstrateClass.TERTIARY:
            return "E1", "E1"
        return "E2", "E2"
    if reaction_type is ReactionType.ADDITION:
        gained: List[str] = sorted(element for element, delta in change.items() if delta > 0)
        if gained == ["H"]:
            return "hydrogenation", "hydrogenation"
        if "H" in gained and any(x in gained for x in HALOGENS):
            return "hydrohalogenation", "addition"
        if gained == ["H", "O"]:
            return "hydration", "addition"
        if len(gained) == 1 and gained[0] in HALOGENS:
            return "halogenation", "addition"
        return "addition", "addition"
    return "unknown", "unknown"
