"""Proyección de Newman a lo largo de un enlace del anillo en silla.

El enlace `b` une la posición `b` (carbono delantero) con `b + 1` (trasero).
Los ángulos (0° = arriba, sentido horario) siguen la geometría escalonada fija
de la silla; la asignación axial/ecuatorial se invierte según el estado
arriba/abajo de cada carbono.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from chemcore.errors import InvalidBondIndex

from .state import RING_SIZE, Placement

if TYPE_CHECKING:
    from .chair import RingPosition

FRONT_RING_ANGLE = 180
BACK_RING_ANGLE = 0
ANTI_PERIPLANAR = 180
GAUCHE = 60


@dataclass(frozen=True)
class NewmanSubstituent:
    kind: str
    label: str
    angle: int
    group: Optional[str] = None
    atom_index: Optional[int] = None


@dataclass(frozen=True)
class NewmanView:
    """Los tres enlaces visibles de un carbono de la proyección."""
    position: int
    atom_index: int
    ring: NewmanSubstituent
    axial: NewmanSubstituent
    equatorial: NewmanSubstituent

    @property
    def carbon_label(self) -> str:
        return f"C{self.position + 1}"

    def substituents(self) -> Tuple[NewmanSubstituent, NewmanSubstituent, NewmanSubstituent]:
        return self.ring, self.axial, self.equatorial


@dataclass(frozen=True)
class NewmanProjection:
    bond_index: int
    front: NewmanView
    back: NewmanView
    anti_periplanar: Tuple[Tuple[NewmanSubstituent, NewmanSubstituent], ...]
    gauche: Tuple[Tuple[NewmanSubstituent, NewmanSubstituent], ...]

    @property
    def angles(self) -> Tuple[int, int, int, int, int, int]:
        """(anillo, axial, ecuatorial) delantero y luego trasero."""
        return (
            self.front.ring.angle,
            self.front.axial.angle,
            self.front.equatorial.angle,
            self.back.ring.angle,
            self.back.axial.angle,
            self.back.equatorial.angle,
        )


def validate_bond_index(bond_index: object) -> int:
    """Comprueba que el índice de enlace esté en 0-5.

    Raises:
        InvalidBondIndex: Índice no entero o fuera de rango.
    """
    if isinstance(bond_index, bool) or not isinstance(bond_index, int):
        raise InvalidBondIndex(f"Bond index must be an integer 0-{RING_SIZE - 1}, got {bond_index!r}")
    if not 0 <= bond_index < RING_SIZE:
        raise InvalidBondIndex(f"Bond index must be 0-{RING_SIZE - 1}, got {bond_index}")
    return bond_index


def newman_projection(positions: Sequence["RingPosition"], bond_index: int) -> NewmanProjection:
    """Calcula la proyección de Newman para el enlace `bond_index`.

    Args:
        positions: Posiciones del anillo ya mapeadas (marco actual).
        bond_index: Enlace 0-5 (0 = C1-C2).

    Returns:
        `NewmanProjection` con ángulos, etiquetas y pares anti/gauche.

    Raises:
        InvalidBondIndex: Si `bond_index` no está en 0-5.
    """
    bond_index = validate_bond_index(bond_index)
    front_pos = positions[bond_index]
    back_pos = positions[(bond_index + 1) % RING_SIZE]

    front_up = front_pos.axial_up
    front = NewmanView(
        position=front_pos.position,
        atom_index=front_pos.atom_index,
        ring=NewmanSubstituent("ring", f"C{(bond_index + 5) % RING_SIZE + 1}", FRONT_RING_ANGLE),
        axial=_slot(front_pos, Placement.AXIAL, 300 if front_up else 60),
        equatorial=_slot(front_pos, Placement.EQUATORIAL, 60 if front_up else 300),
    )
    back_up = back_pos.axial_up
    back = NewmanView(
        position=back_pos.position,
        atom_index=back_pos.atom_index,
        ring=NewmanSubstituent("ring", f"C{(bond_index + 2) % RING_SIZE + 1}", BACK_RING_ANGLE),
        axial=_slot(back_pos, Placement.AXIAL, 240 if back_up else 120),
        equatorial=_slot(back_pos, Placement.EQUATORIAL, 120 if back_up else 240),
    )

    anti: List[Tuple[NewmanSubstituent, NewmanSubstituent]] = []
    gauche: List[Tuple[NewmanSubstituent, NewmanSubstituent]] = []
    for f_sub in front.substituents():
        for b_sub in back.substituents():
            dihedral = dihedral_angle(f_sub.angle, b_sub.angle)
            if dihedral == ANTI_PERIPLANAR:
                anti.append((f_sub, b_sub))
            elif dihedral == GAUCHE:
                gauche.append((f_sub, b_sub))
    return NewmanProjection(bond_index, front, back, tuple(anti), tuple(gauche))


def dihedral_angle(first: int, second: int) -> int:
    """Ángulo diedro proyectado (0-180) entre dos enlaces de la proyección."""
    delta = abs(first - second) % 360
    return min(delta, 360 - delta)


def _slot(position: "RingPosition", placement: Placement, angle: int) -> NewmanSubstituent:
    placed = position.placed(placement)
    if placed is None:
        return NewmanSubstituent(placement.value, "H", angle)
    return NewmanSubstituent(placement.value, placed.label, angle, placed.group, placed.atom_index)
