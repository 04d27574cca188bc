"""Modelos de datos base del motor estereoquímico.

Este módulo concentra las estructuras que representan el grafo molecular
(átomos y enlaces) producido por el analizador de notación lineal. A
diferencia de un grafo editable, `MoleculeGraph` es inmutable: cada llamada a
`parse` crea un grafo nuevo y ningún módulo posterior lo modifica; las etapas
de anotación (hidrógenos implícitos, anillos) devuelven copias.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

# Identificador reservado para el hidrógeno implícito de un átomo entre
# corchetes dentro de la lista de vecinos en orden de lectura.
IMPLICIT_H = -1


class BondOrder(str, Enum):
    """Órdenes de enlace reconocidos por el analizador."""
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    AROMATIC = "aromatic"

    @property
    def valence(self) -> float:
        """Contribución del enlace a la valencia de cada extremo."""
        return _BOND_VALENCE[self]

    @property
    def symbol(self) -> str:
        """Símbolo del enlace en la notación lineal."""
        return _BOND_SYMBOL[self]

    @property
    def multiplicity(self) -> int:
        """Orden entero usado para átomos fantasma (aromático cuenta como 1)."""
        return _BOND_MULTIPLICITY[self]


_BOND_VALENCE = {
    BondOrder.SINGLE: 1.0,
    BondOrder.DOUBLE: 2.0,
    BondOrder.TRIPLE: 3.0,
    BondOrder.AROMATIC: 1.5,
}

_BOND_SYMBOL = {
    BondOrder.SINGLE: "-",
    BondOrder.DOUBLE: "=",
    BondOrder.TRIPLE: "#",
    BondOrder.AROMATIC: ":",
}

_BOND_MULTIPLICITY = {
    BondOrder.SINGLE: 1,
    BondOrder.DOUBLE: 2,
    BondOrder.TRIPLE: 3,
    BondOrder.AROMATIC: 1,
}


class BondDirection(str, Enum):
    """Marcadores direccionales `/` y `\\` para la geometría E/Z."""
    NONE = "none"
    UP = "/"
    DOWN = "\\"

    @property
    def sign(self) -> int:
        """+1 para `/`, -1 para `\\`, 0 si no hay marcador."""
        if self is BondDirection.UP:
            return 1
        if self is BondDirection.DOWN:
            return -1
        return 0


class ChiralClass(str, Enum):
    """Clase de quiralidad tal como aparece escrita (`@` / `@@`)."""
    NONE = "none"
    ANTICLOCKWISE = "@"
    CLOCKWISE = "@@"

    def inverted(self) -> "ChiralClass":
        """Devuelve la clase opuesta (una permutación impar la invierte)."""
        if self is ChiralClass.ANTICLOCKWISE:
            return ChiralClass.CLOCKWISE
        if self is ChiralClass.CLOCKWISE:
            return ChiralClass.ANTICLOCKWISE
        return self


# Subconjunto orgánico que puede escribirse sin corchetes.
ORGANIC_SUBSET: FrozenSet[str] = frozenset({"B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I"})

# Símbolos aromáticos en minúscula admitidos (fuera y dentro de corchetes).
AROMATIC_SYMBOLS: Dict[str, str] = {
    "b": "B",
    "c": "C",
    "n": "N",
    "o": "O",
    "p": "P",
    "s": "S",
    "se": "Se",
    "as": "As",
}

# Números atómicos usados por el clasificador de prioridades (CIP-lite).
ATOMIC_NUMBERS: Dict[str, int] = {
    "H": 1, "He": 2, "Li": 3, "Be": 4, "B": 5, "C": 6, "N": 7, "O": 8,
    "F": 9, "Ne": 10, "Na": 11, "Mg": 12, "Al": 13, "Si": 14, "P": 15,
    "S": 16, "Cl": 17, "Ar": 18, "K": 19, "Ca": 20, "Sc": 21, "Ti": 22,
    "V": 23, "Cr": 24, "Mn": 25, "Fe": 26, "Co": 27, "Ni": 28, "Cu": 29,
    "Zn": 30, "Ga": 31, "Ge": 32, "As": 33, "Se": 34, "Br": 35, "Kr": 36,
    "Rb": 37, "Sr": 38, "Y": 39, "Zr": 40, "Nb": 41, "Mo": 42, "Tc": 43,
    "Ru": 44, "Rh": 45, "Pd": 46, "Ag": 47, "Cd": 48, "In": 49, "Sn": 50,
    "Sb": 51, "Te": 52, "I": 53, "Xe": 54, "Cs": 55, "Ba": 56, "Pt": 78,
    "Au": 79, "Hg": 80, "Tl": 81, "Pb": 82, "Bi": 83,
}


@dataclass(frozen=True)
class Atom:
    """Átomo del grafo; `index` es el orden de creación durante la lectura."""
    index: int
    element: str
    aromatic: bool = False
    charge: int = 0
    isotope: Optional[int] = None
    explicit_h: Optional[int] = None
    implicit_h: int = 0
    bracket: bool = False
    chirality: ChiralClass = ChiralClass.NONE
    neighbor_order: Tuple[int, ...] = ()
    rings: Tuple[int, ...] = ()
    position: int = 0

    @property
    def atomic_number(self) -> int:
        """Número atómico del elemento (0 si no está tabulado)."""
        return ATOMIC_NUMBERS.get(self.element, 0)

    @property
    def hydrogen_count(self) -> int:
        """Hidrógenos totales: explícitos entre corchetes más implícitos."""
        return (self.explicit_h or 0) + self.implicit_h

    @property
    def in_ring(self) -> bool:
        return bool(self.rings)


@dataclass(frozen=True)
class Bond:
    """Enlace entre `a1` y `a2`; `a1` es el átomo escrito primero."""
    index: int
    a1: int
    a2: int
    order: BondOrder = BondOrder.SINGLE
    direction: BondDirection = BondDirection.NONE
    ring_closure: Optional[int] = None

    def other(self, atom_index: int) -> int:
        """Devuelve el extremo opuesto a `atom_index`.

        Raises:
            ValueError: Si el átomo no pertenece al enlace.
        """
        if atom_index == self.a1:
            return self.a2
        if atom_index == self.a2:
            return self.a1
        raise ValueError(f"Atom {atom_index} is not part of bond {self.index}")

    def has(self, atom_index: int) -> bool:
        return atom_index in (self.a1, self.a2)

    @property
    def atoms(self) -> Tuple[int, int]:
        return self.a1, self.a2


class MoleculeGraph:
    """Grafo molecular inmutable con consultas de adyacencia."""

    def __init__(
        self,
        atoms: Sequence[Atom],
        bonds: Sequence[Bond],
        notation: str = "",
    ) -> None:
        """Construye el grafo y sus índices de adyacencia.

        Args:
            atoms: Átomos en orden de lectura; `atoms[i].index` debe ser `i`.
            bonds: Enlaces en orden de creación; `bonds[i].index` debe ser `i`.
            notation: Cadena original de la que procede el grafo.

        Raises:
            ValueError: Si los índices no son consecutivos o un enlace
                referencia un átomo inexistente.

        Side Effects:
            Ninguno sobre los argumentos; copia las secuencias en tuplas.
        """
        self.atoms: Tuple[Atom, ...] = tuple(atoms)
        self.bonds: Tuple[Bond, ...] = tuple(bonds)
        self.notation = notation
        for position, atom in enumerate(self.atoms):
            if atom.index != position:
                raise ValueError(f"Atom index {atom.index} out of parse order at {position}")
        self._bond_ids: Dict[int, List[int]] = {atom.index: [] for atom in self.atoms}
        self._pairs: Dict[FrozenSet[int], int] = {}
        for position, bond in enumerate(self.bonds):
            if bond.index != position:
                raise ValueError(f"Bond index {bond.index} out of order at {position}")
            if bond.a1 not in self._bond_ids or bond.a2 not in self._bond_ids:
                raise ValueError(f"Bond {bond.index} references an unknown atom")
            self._bond_ids[bond.a1].append(bond.index)
            self._bond_ids[bond.a2].append(bond.index)
            self._pairs[frozenset((bond.a1, bond.a2))] = bond.index

    def __len__(self) -> int:
        return len(self.atoms)

    def __repr__(self) -> str:
        return f"MoleculeGraph({self.notation!r}, atoms={len(self.atoms)}, bonds={len(self.bonds)})"

    def atom(self, atom_index: int) -> Atom:
        return self.atoms[atom_index]

    def bond(self, bond_index: int) -> Bond:
        return self.bonds[bond_index]

    def bonds_of(self, atom_index: int) -> List[Bond]:
        """Enlaces del átomo en orden de creación."""
        return [self.bonds[bond_id] for bond_id in self._bond_ids[atom_index]]

    def neighbors(self, atom_index: int) -> List[int]:
        """Vecinos pesados del átomo en orden de creación de los enlaces."""
        return [bond.other(atom_index) for bond in self.bonds_of(atom_index)]

    def bond_between(self, atom_1: int, atom_2: int) -> Optional[Bond]:
        bond_id = self._pairs.get(frozenset((atom_1, atom_2)))
        if bond_id is None:
            return None
        return self.bonds[bond_id]

    def degree(self, atom_index: int) -> int:
        return len(self._bond_ids[atom_index])

    def bond_order_sum(self, atom_index: int) -> float:
        """Suma de órdenes de enlace (aromático = 1.5) sin truncar."""
        return sum(bond.order.valence for bond in self.bonds_of(atom_index))

    def hydrogen_count(self, atom_index: int) -> int:
        return self.atoms[atom_index].hydrogen_count

    def ring_bonds(self) -> List[Bond]:
        """Enlaces creados por un cierre de anillo."""
        return [bond for bond in self.bonds if bond.ring_closure is not None]

    def elements(self) -> List[str]:
        return [atom.element for atom in self.atoms]

    def fragments(self) -> List[List[int]]:
        """Componentes conexas (fragmentos separados por `.`)."""
        seen: set[int] = set()
        components: List[List[int]] = []
        for atom in self.atoms:
            if atom.index in seen:
                continue
            stack = [atom.index]
            component: List[int] = []
            seen.add(atom.index)
            while stack:
                node = stack.pop()
                component.append(node)
                for nbr in self.neighbors(node):
                    if nbr not in seen:
                        seen.add(nbr)
                        stack.append(nbr)
            components.append(sorted(component))
        return components

    def with_atoms(self, atoms: Iterable[Atom]) -> "MoleculeGraph":
        """Devuelve un grafo nuevo con los átomos sustituidos y los mismos enlaces."""
        return MoleculeGraph(list(atoms), self.bonds, self.notation)

    def replace_atom(self, atom_index: int, **changes) -> "MoleculeGraph":
        """Copia el grafo cambiando campos de un único átomo."""
        atoms = list(self.atoms)
        atoms[atom_index] = replace(atoms[atom_index], **changes)
        return self.with_atoms(atoms)
