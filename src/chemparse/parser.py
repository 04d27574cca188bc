"""Analizador de la notación lineal a `MoleculeGraph`.

El estado de lectura vive en un `_ParseContext` local a cada llamada: no hay
estado global y dos lecturas concurrentes no comparten nada. Los cierres de
anillo se resuelven con una tabla etiqueta -> átomo pendiente; un dígito
puede reutilizarse una vez cerrado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from chemcalc.rings import annotate_rings
from chemcalc.valence import resolve_hydrogens
from chemcore.errors import (
    MismatchedRingClosure,
    NotationSyntaxError,
    UnbalancedBranchError,
    UnclosedRingError,
)
from chemcore.model import (
    IMPLICIT_H,
    Atom,
    Bond,
    BondDirection,
    BondOrder,
    MoleculeGraph,
)
from chemcore.options import ParseOptions

from .tokens import AtomSpec, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Marca temporal en la lista de vecinos para un cierre de anillo aún abierto.
_RING_SLOT = -2


@dataclass
class _PendingRing:
    atom: int
    slot: int
    order: Optional[BondOrder]
    direction: BondDirection
    position: int


@dataclass
class _ParseContext:
    notation: str
    options: ParseOptions
    specs: List[Tuple[AtomSpec, int]] = field(default_factory=list)
    bonds: List[Bond] = field(default_factory=list)
    neighbor_order: List[List[int]] = field(default_factory=list)
    pairs: Dict[frozenset, int] = field(default_factory=dict)
    open_rings: Dict[int, _PendingRing] = field(default_factory=dict)
    branch_stack: List[Tuple[int, int]] = field(default_factory=list)
    prev_atom: Optional[int] = None
    pending_order: Optional[BondOrder] = None
    pending_direction: BondDirection = BondDirection.NONE
    pending_position: Optional[int] = None
    last_kind: Optional[TokenKind] = None
    closures: int = 0

    def has_pending_bond(self) -> bool:
        return self.pending_order is not None

    def clear_pending_bond(self) -> None:
        self.pending_order = None
        self.pending_direction = BondDirection.NONE
        self.pending_position = None

    def implied_order(self, atom_1: int, atom_2: int) -> BondOrder:
        if self.specs[atom_1][0].aromatic and self.specs[atom_2][0].aromatic:
            return BondOrder.AROMATIC
        return BondOrder.SINGLE

    def add_bond(
        self,
        atom_1: int,
        atom_2: int,
        order: BondOrder,
        direction: BondDirection,
        ring_closure: Optional[int] = None,
    ) -> Bond:
        bond = Bond(
            index=len(self.bonds),
            a1=atom_1,
            a2=atom_2,
            order=order,
            direction=direction,
            ring_closure=ring_closure,
        )
        self.bonds.append(bond)
        self.pairs[frozenset((atom_1, atom_2))] = bond.index
        return bond


def parse_raw(notation: str, options: Optional[ParseOptions] = None) -> MoleculeGraph:
    """Lee la notación y devuelve el grafo sin hidrógenos implícitos.

    Args:
        notation: Cadena en notación lineal (subconjunto tipo SMILES).
        options: Opciones de lectura; se usan los valores por defecto si es None.

    Returns:
        Grafo con átomos en orden de lectura y `implicit_h` a cero.

    Raises:
        NotationSyntaxError: Token fuera de lugar o cadena vacía.
        UnbalancedBranchError: Paréntesis sin pareja.
        UnclosedRingError: Etiqueta de anillo abierta al final.
        MismatchedRingClosure: Cierre incoherente.
        UnsupportedAtomError: Símbolo de elemento no admitido.
    """
    options = options or ParseOptions()
    ctx = _ParseContext(notation=notation, options=options)
    for token in tokenize(notation):
        _consume(ctx, token)
        ctx.last_kind = token.kind
    _finish(ctx)

    atoms = []
    for index, (spec, position) in enumerate(ctx.specs):
        atoms.append(
            Atom(
                index=index,
                element=spec.element,
                aromatic=spec.aromatic,
                charge=spec.charge,
                isotope=spec.isotope,
                explicit_h=spec.hydrogens if spec.bracket else None,
                bracket=spec.bracket,
                chirality=spec.chirality,
                neighbor_order=tuple(ctx.neighbor_order[index]),
                position=position,
            )
        )
    return MoleculeGraph(atoms, ctx.bonds, notation)


def parse_molecule(notation: str, options: Optional[ParseOptions] = None) -> MoleculeGraph:
    """Lee la notación y completa hidrógenos implícitos y anillos.

    Raises:
        ParseError: Cualquier subclase, incluida `ValenceViolation`.
    """
    options = options or ParseOptions()
    graph = parse_raw(notation, options)
    if options.resolve_hydrogens:
        graph = resolve_hydrogens(graph)
    if options.perceive_rings:
        graph = annotate_rings(graph)
    logger.debug("Parsed %r: %d atoms, %d bonds", notation, len(graph.atoms), len(graph.bonds))
    return graph


def _consume(ctx: _ParseContext, token: Token) -> None:
    kind = token.kind
    if kind is TokenKind.ATOM:
        _on_atom(ctx, token)
    elif kind is TokenKind.BOND:
        _on_bond(ctx, token)
    elif kind is TokenKind.BRANCH_OPEN:
        _on_branch_open(ctx, token)
    elif kind is TokenKind.BRANCH_CLOSE:
        _on_branch_close(ctx, token)
    elif kind is TokenKind.RING:
        _on_ring(ctx, token)
    elif kind is TokenKind.DOT:
        _on_dot(ctx, token)
    else:
        raise NotationSyntaxError(f"Unsupported token {token.text!r}", token.position)


def _on_atom(ctx: _ParseContext, token: Token) -> None:
    spec = token.atom
    index = len(ctx.specs)
    ctx.specs.append((spec, token.position))
    ctx.neighbor_order.append([])
    if ctx.prev_atom is not None:
        prev = ctx.prev_atom
        order = ctx.pending_order or ctx.implied_order(prev, index)
        ctx.add_bond(prev, index, order, ctx.pending_direction)
        ctx.neighbor_order[prev].append(index)
        ctx.neighbor_order[index].append(prev)
    elif ctx.has_pending_bond():
        raise NotationSyntaxError("Bond symbol without a preceding atom", ctx.pending_position)
    if spec.bracket and spec.hydrogens:
        ctx.neighbor_order[index].extend([IMPLICIT_H] * spec.hydrogens)
    ctx.prev_atom = index
    ctx.clear_pending_bond()


def _on_bond(ctx: _ParseContext, token: Token) -> None:
    if ctx.prev_atom is None:
        raise NotationSyntaxError("Bond symbol without a preceding atom", token.position)
    if ctx.has_pending_bond():
        raise NotationSyntaxError("Two consecutive bond symbols", token.position)
    ctx.pending_order = token.order
    ctx.pending_direction = token.direction
    ctx.pending_position = token.position


def _on_branch_open(ctx: _ParseContext, token: Token) -> None:
    if ctx.prev_atom is None:
        raise NotationSyntaxError("Branch opened without a preceding atom", token.position)
    if ctx.has_pending_bond():
        raise NotationSyntaxError("Bond symbol before a branch", ctx.pending_position)
    if len(ctx.branch_stack) >= ctx.options.max_branch_depth:
        raise NotationSyntaxError(
            f"Branch nesting deeper than {ctx.options.max_branch_depth}", token.position
        )
    ctx.branch_stack.append((ctx.prev_atom, token.position))


def _on_branch_close(ctx: _ParseContext, token: Token) -> None:
    if not ctx.branch_stack:
        raise UnbalancedBranchError("Closing ')' without an open branch", token.position)
    if ctx.last_kind is TokenKind.BRANCH_OPEN:
        raise NotationSyntaxError("Empty branch", token.position)
    if ctx.has_pending_bond():
        raise NotationSyntaxError("Bond symbol at the end of a branch", ctx.pending_position)
    ctx.prev_atom, _ = ctx.branch_stack.pop()


def _on_dot(ctx: _ParseContext, token: Token) -> None:
    if ctx.prev_atom is None:
        raise NotationSyntaxError("Fragment separator without a preceding atom", token.position)
    if ctx.has_pending_bond():
        raise NotationSyntaxError("Bond symbol before a fragment separator", ctx.pending_position)
    if ctx.branch_stack:
        raise NotationSyntaxError("Fragment separator inside a branch", token.position)
    ctx.prev_atom = None


def _on_ring(ctx: _ParseContext, token: Token) -> None:
    if ctx.prev_atom is None:
        raise NotationSyntaxError("Ring label without a preceding atom", token.position)
    label = token.ring_label
    current = ctx.prev_atom
    pending = ctx.open_rings.pop(label, None)
    if pending is None:
        ctx.neighbor_order[current].append(_RING_SLOT)
        ctx.open_rings[label] = _PendingRing(
            atom=current,
            slot=len(ctx.neighbor_order[current]) - 1,
            order=ctx.pending_order,
            direction=ctx.pending_direction,
            position=token.position,
        )
        ctx.clear_pending_bond()
        return

    if pending.atom == current:
        raise MismatchedRingClosure(f"Ring label {label} closes on its own atom", token.position)
    if frozenset((pending.atom, current)) in ctx.pairs:
        raise MismatchedRingClosure(
            f"Ring label {label} duplicates an existing bond", token.position
        )
    opener_order, closer_order = pending.order, ctx.pending_order
    if opener_order is not None and closer_order is not None and opener_order != closer_order:
        raise MismatchedRingClosure(
            f"Ring label {label} closed with {closer_order.symbol} but opened with {opener_order.symbol}",
            token.position,
        )
    order = opener_order or closer_order or ctx.implied_order(pending.atom, current)

    # El marcador en el átomo que cierra se lee como si el átomo que abre
    # estuviera escrito a continuación: respecto a a1 -> a2 se invierte.
    direction = pending.direction
    closer_direction = _reverse_direction(ctx.pending_direction)
    if direction is BondDirection.NONE:
        direction = closer_direction
    elif closer_direction is not BondDirection.NONE and closer_direction is not direction:
        raise MismatchedRingClosure(
            f"Ring label {label} has conflicting direction markers", token.position
        )

    ctx.add_bond(pending.atom, current, order, direction, ring_closure=ctx.closures)
    ctx.closures += 1
    ctx.neighbor_order[pending.atom][pending.slot] = current
    ctx.neighbor_order[current].append(pending.atom)
    ctx.clear_pending_bond()


def _reverse_direction(direction: BondDirection) -> BondDirection:
    if direction is BondDirection.UP:
        return BondDirection.DOWN
    if direction is BondDirection.DOWN:
        return BondDirection.UP
    return BondDirection.NONE


def _finish(ctx: _ParseContext) -> None:
    if not ctx.specs:
        raise NotationSyntaxError("Empty notation", 0)
    if ctx.has_pending_bond():
        raise NotationSyntaxError("Bond symbol at the end of the notation", ctx.pending_position)
    if ctx.last_kind is TokenKind.DOT:
        raise NotationSyntaxError("Fragment separator at the end of the notation", len(ctx.notation) - 1)
    if ctx.branch_stack:
        _, position = ctx.branch_stack[-1]
        raise UnbalancedBranchError("Branch opened but never closed", position)
    if ctx.open_rings:
        label, pending = min(ctx.open_rings.items(), key=lambda item: item[1].position)
        raise UnclosedRingError(f"Ring label {label} is never closed", pending.position)
