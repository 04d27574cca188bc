"""Inferencia del tipo de sustrato y del grupo saliente a partir del grafo."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from chemcore.model import BondOrder, MoleculeGraph

from .tables import LEAVING_GROUP_BY_ELEMENT, LeavingGroup, SubstrateClass

logger = logging.getLogger(__name__)

_QUALITY_RANK = {
    LeavingGroup.EXCELLENT: 0,
    LeavingGroup.GOOD: 1,
    LeavingGroup.MODERATE: 2,
    LeavingGroup.POOR: 3,
}


@dataclass(frozen=True)
class SubstrateProfile:
    """Carbono electrófilo, grupo saliente y carbonos beta con hidrógeno."""
    carbon: int
    leaving_atom: int
    substrate: SubstrateClass
    leaving_group: LeavingGroup
    beta_carbons: Tuple[int, ...] = ()


@dataclass(frozen=True)
class EliminationProduct:
    alpha: int
    beta: int
    substitution: int
    is_zaitsev: bool


def find_leaving_group(graph: MoleculeGraph) -> Optional[Tuple[int, int]]:
    """Devuelve (carbono, átomo saliente) del mejor grupo saliente del grafo."""
    candidates: List[Tuple[Tuple[int, int, int], int, int]] = []
    for bond in graph.bonds:
        if bond.order is not BondOrder.SINGLE:
            continue
        for carbon, leaving in (bond.atoms, bond.atoms[::-1]):
            if graph.atom(carbon).element != "C":
                continue
            quality = LEAVING_GROUP_BY_ELEMENT.get(graph.atom(leaving).element)
            if quality is None or graph.atom(leaving).aromatic:
                continue
            rank = (_QUALITY_RANK[quality], -graph.atom(leaving).atomic_number, carbon)
            candidates.append((rank, carbon, leaving))
    if not candidates:
        return None
    _, carbon, leaving = min(candidates)
    return carbon, leaving


def classify_substrate(graph: MoleculeGraph, carbon: int, leaving_atom: Optional[int] = None) -> SubstrateClass:
    """Clase del carbono que porta el grupo saliente."""
    atom = graph.atom(carbon)
    if atom.aromatic or any(b.order is not BondOrder.SINGLE for b in graph.bonds_of(carbon)):
        return SubstrateClass.VINYL
    carbons = [
        nbr for nbr in graph.neighbors(carbon)
        if nbr != leaving_atom and graph.atom(nbr).element == "C"
    ]
    if any(graph.atom(nbr).aromatic for nbr in carbons):
        return SubstrateClass.BENZYLIC
    if any(
        b.order is BondOrder.DOUBLE and graph.atom(b.other(nbr)).element == "C"
        for nbr in carbons
        for b in graph.bonds_of(nbr)
    ):
        return SubstrateClass.ALLYLIC
    if len(carbons) == 0:
        return SubstrateClass.METHYL
    if len(carbons) == 1:
        return SubstrateClass.PRIMARY
    if len(carbons) == 2:
        return SubstrateClass.SECONDARY
    return SubstrateClass.TERTIARY


def infer_conditions_from_graph(graph: MoleculeGraph) -> Optional[SubstrateProfile]:
    """Infiere clase de sustrato y calidad del grupo saliente.

    Returns:
        `SubstrateProfile`, o None si el grafo no tiene grupo saliente.
    """
    found = find_leaving_group(graph)
    if found is None:
        logger.debug("No leaving group found in %r", graph.notation)
        return None
    carbon, leaving = found
    beta = tuple(
        nbr for nbr in graph.neighbors(carbon)
        if nbr != leaving
        and graph.atom(nbr).element == "C"
        and not graph.atom(nbr).aromatic
        and graph.atom(nbr).hydrogen_count > 0
    )
    return SubstrateProfile(
        carbon=carbon,
        leaving_atom=leaving,
        substrate=classify_substrate(graph, carbon, leaving),
        leaving_group=LEAVING_GROUP_BY_ELEMENT[graph.atom(leaving).element],
        beta_carbons=beta,
    )


def elimination_products(graph: MoleculeGraph, profile: Optional[SubstrateProfile] = None) -> List[EliminationProduct]:
    """Alquenos posibles por eliminación beta, del más al menos sustituido.

    El producto de Zaitsev es el más sustituido; con una base voluminosa se
    espera el menos sustituido (Hofmann), ver `major_elimination_product`.
    """
    profile = profile or infer_conditions_from_graph(graph)
    if profile is None:
        return []
    alpha = profile.carbon
    products = []
    for beta in profile.beta_carbons:
        count = _carbon_count(graph, alpha, exclude=(beta, profile.leaving_atom))
        count += _carbon_count(graph, beta, exclude=(alpha,))
        products.append((count, beta))
    if not products:
        return []
    most = max(count for count, _ in products)
    ordered = sorted(products, key=lambda item: (-item[0], item[1]))
    return [EliminationProduct(alpha, beta, count, count == most) for count, beta in ordered]


def major_elimination_product(
    graph: MoleculeGraph,
    bulky_base: bool = False,
    profile: Optional[SubstrateProfile] = None,
    allowed_betas: Optional[Iterable[int]] = None,
) -> Optional[EliminationProduct]:
    """Alqueno mayoritario: Zaitsev, o Hofmann con base voluminosa.

    Args:
        graph: Grafo del sustrato.
        bulky_base: True para una base voluminosa (Hofmann).
        profile: Perfil ya inferido; por defecto se infiere del grafo.
        allowed_betas: Si se indica, solo se consideran estos carbonos beta
            (p. ej. los que cumplen la geometría antiperiplanar de E2).

    Returns:
        El producto elegido, o None si no queda ningún carbono beta.
    """
    products = elimination_products(graph, profile)
    if allowed_betas is not None:
        allowed = set(allowed_betas)
        products = [product for product in products if product.beta in allowed]
    if not products:
        return None
    if bulky_base:
        return min(products, key=lambda p: (p.substitution, p.beta))
    return products[0]


def _carbon_count(graph: MoleculeGraph, atom_index: int, exclude: Tuple[int, ...]) -> int:
    return sum(
        1 for nbr in graph.neighbors(atom_index)
        if nbr not in exclude and graph.atom(nbr).element == "C"
    )
