"""Estado conformacional de un anillo de seis miembros.

`ConformationalState` es el único objeto mutable del motor y pertenece al
llamador: el mapeador de geometría lo lee pero nunca lo modifica ni lo guarda.
Las colocaciones se expresan en el marco sin invertir, sobre la numeración
canónica del anillo (posiciones 0-5).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

from chemcore.errors import InvalidPlacement

RING_SIZE = 6


class Placement(str, Enum):
    AXIAL = "axial"
    EQUATORIAL = "equatorial"

    def opposite(self) -> "Placement":
        if self is Placement.AXIAL:
            return Placement.EQUATORIAL
        return Placement.AXIAL


@dataclass
class ConformationalState:
    """Bandera de inversión de silla y colocación elegida por posición.

    Attributes:
        flipped: True si se muestra la silla invertida.
        placements: Posición del anillo -> colocación del primer sustituyente
            en el marco sin invertir. Las posiciones ausentes son ecuatoriales.
    """

    flipped: bool = False
    placements: Dict[int, Placement] = field(default_factory=dict)

    def flip(self) -> None:
        """Invierte la silla.

        Side Effects:
            Alterna `self.flipped`; las colocaciones no cambian.
        """
        self.flipped = not self.flipped

    def place(self, position: int, placement: Union[Placement, str]) -> None:
        """Fija la colocación del sustituyente de una posición.

        Args:
            position: Posición del anillo (0-5).
            placement: `Placement` o su valor textual ("axial"/"equatorial").

        Raises:
            InvalidPlacement: Si la posición o la colocación no son válidas.

        Side Effects:
            Modifica `self.placements`.
        """
        if not isinstance(position, int) or not 0 <= position < RING_SIZE:
            raise InvalidPlacement(f"Ring position must be 0-{RING_SIZE - 1}, got {position!r}")
        try:
            value = Placement(placement)
        except ValueError as exc:
            raise InvalidPlacement(f"Unknown placement {placement!r}") from exc
        self.placements[position] = value

    def clear(self, position: Optional[int] = None) -> None:
        """Borra una colocación (o todas si `position` es None)."""
        if position is None:
            self.placements.clear()
        else:
            self.placements.pop(position, None)

    def placement_for(self, position: int) -> Placement:
        return self.placements.get(position, Placement.EQUATORIAL)

    def copy(self) -> "ConformationalState":
        return ConformationalState(flipped=self.flipped, placements=dict(self.placements))
