"""Requisito antiperiplanar de la eliminación E2 sobre un ciclohexano en silla.

En el anillo, el grupo saliente y el H beta solo quedan a 180° cuando ambos son
axiales en carbonos vecinos (trans-diaxiales). Un grupo saliente ecuatorial
necesita invertir la silla; un carbono beta cuyo enlace axial lleva un
sustituyente no puede aportar el H. Los carbonos beta fuera del anillo giran
libremente y no tienen restricción.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from chemconf.chair import PlacedSubstituent, ProjectionRecord, map_geometry
from chemconf.newman import NewmanProjection, NewmanSubstituent, NewmanView, newman_projection
from chemconf.state import RING_SIZE, ConformationalState
from chemcore.model import MoleculeGraph

from .substrate import (
    EliminationProduct,
    SubstrateProfile,
    elimination_products,
    infer_conditions_from_graph,
    major_elimination_product,
)

logger = logging.getLogger(__name__)

EQUATORIAL_LEAVING_GROUP = "leaving group is equatorial; ring flip required for anti-periplanar geometry"
NO_AXIAL_HYDROGEN = "no axial hydrogen anti-periplanar to the leaving group"


@dataclass(frozen=True)
class E2Analysis:
    """Resultado de `analyze_e2`.

    Attributes:
        alpha: Carbono que porta el grupo saliente.
        leaving_atom: Átomo del grupo saliente.
        leaving_group_axial: True/False según la silla mostrada; None si el
            carbono alfa no pertenece al anillo mapeado.
        allowed_betas: Carbonos beta con un H antiperiplanar disponible.
        blocked_betas: Pares (carbono beta, motivo) sin geometría válida.
        products: Productos de eliminación que pueden formarse.
        major: Producto mayoritario entre los permitidos, o None.
    """
    alpha: int
    leaving_atom: int
    leaving_group_axial: Optional[bool]
    allowed_betas: Tuple[int, ...]
    blocked_betas: Tuple[Tuple[int, str], ...]
    products: Tuple[EliminationProduct, ...]
    major: Optional[EliminationProduct]

    @property
    def requires_ring_flip(self) -> bool:
        return self.leaving_group_axial is False

    def blocked_reason(self, beta: int) -> Optional[str]:
        for atom_index, reason in self.blocked_betas:
            if atom_index == beta:
                return reason
        return None


def analyze_e2(
    graph: MoleculeGraph,
    state: Optional[ConformationalState] = None,
    bulky_base: bool = False,
    ring_index: int = 0,
) -> Optional[E2Analysis]:
    """Aplica el requisito antiperiplanar a los carbonos beta del sustrato.

    Sin `state` no se mapea ninguna silla y todos los carbonos beta quedan
    permitidos, como en un sustrato acíclico.

    Args:
        graph: Grafo resuelto del sustrato.
        state: Estado conformacional de la silla; solo se lee.
        bulky_base: True para una base voluminosa (Hofmann).
        ring_index: Anillo de seis miembros que se mapea.

    Returns:
        `E2Analysis`, o None si el grafo no tiene grupo saliente.

    Raises:
        GeometryError: Si `state` se indica y el anillo no puede mapearse.
    """
    profile = infer_conditions_from_graph(graph)
    if profile is None:
        return None
    record = map_geometry(graph, state, ring_index=ring_index) if state is not None else None
    return analyze_e2_record(graph, record, profile, bulky_base)


def analyze_e2_record(
    graph: MoleculeGraph,
    record: Optional[ProjectionRecord],
    profile: SubstrateProfile,
    bulky_base: bool = False,
) -> E2Analysis:
    """Igual que `analyze_e2` sobre un `ProjectionRecord` ya calculado."""
    alpha = profile.carbon
    leaving_axial: Optional[bool] = None
    blocked: Dict[int, str] = {}
    leaving = _leaving_substituent(record, alpha, profile.leaving_atom) if record is not None else None
    if leaving is not None:
        alpha_position = record.position_of(alpha)
        leaving_axial = leaving.is_axial
        for beta in profile.beta_carbons:
            if beta not in record.ring_atoms:
                continue
            if not leaving_axial:
                blocked[beta] = EQUATORIAL_LEAVING_GROUP
            elif not _has_anti_hydrogen(record, alpha_position, record.position_of(beta), profile.leaving_atom):
                blocked[beta] = NO_AXIAL_HYDROGEN

    allowed = tuple(beta for beta in profile.beta_carbons if beta not in blocked)
    products = tuple(p for p in elimination_products(graph, profile) if p.beta in allowed)
    major = major_elimination_product(graph, bulky_base, profile, allowed_betas=allowed)
    logger.debug(
        "E2 at C%d: allowed %s, blocked %s, major %s",
        alpha, allowed, sorted(blocked), major.beta if major else None,
    )
    return E2Analysis(
        alpha=alpha,
        leaving_atom=profile.leaving_atom,
        leaving_group_axial=leaving_axial,
        allowed_betas=allowed,
        blocked_betas=tuple(sorted(blocked.items())),
        products=products,
        major=major,
    )


def _has_anti_hydrogen(record: ProjectionRecord, alpha_position: int, beta_position: int, leaving_atom: int) -> bool:
    """Busca en la proyección de Newman del enlace alfa-beta un H anti al saliente."""
    if beta_position == (alpha_position + 1) % RING_SIZE:
        projection = newman_projection(record.positions, alpha_position)
        alpha_view, beta_view = projection.front, projection.back
    else:
        projection = newman_projection(record.positions, beta_position)
        alpha_view, beta_view = projection.back, projection.front
    leaving_slot = _slot_of(alpha_view, leaving_atom)
    hydrogen = beta_view.axial
    if leaving_slot is None or hydrogen.atom_index is not None:
        return False
    return _is_anti(projection, leaving_slot.angle, hydrogen.angle)


def _leaving_substituent(record: ProjectionRecord, alpha: int, leaving_atom: int) -> Optional[PlacedSubstituent]:
    if alpha not in record.ring_atoms:
        return None
    for substituent in record.positions[record.position_of(alpha)].substituents:
        if substituent.atom_index == leaving_atom:
            return substituent
    return None


def _slot_of(view: NewmanView, atom_index: int) -> Optional[NewmanSubstituent]:
    for substituent in (view.axial, view.equatorial):
        if substituent.atom_index == atom_index:
            return substituent
    return None


def _is_anti(projection: NewmanProjection, first: int, second: int) -> bool:
    pairs: List[Tuple[int, int]] = [(f.angle, b.angle) for f, b in projection.anti_periplanar]
    return (first, second) in pairs or (second, first) in pairs
