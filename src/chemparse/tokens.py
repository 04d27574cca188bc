"""Analizador léxico de la notación molecular lineal.

Cada token conserva su desplazamiento en la cadena para que los errores de
lectura señalen la posición culpable. Los átomos se decodifican aquí por
completo (incluido el contenido entre corchetes); el analizador sintáctico
solo se ocupa de la conectividad.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chemcore.errors import NotationSyntaxError, UnsupportedAtomError
from chemcore.model import (
    AROMATIC_SYMBOLS,
    ATOMIC_NUMBERS,
    ORGANIC_SUBSET,
    BondDirection,
    BondOrder,
    ChiralClass,
)


class TokenKind(str, Enum):
    ATOM = "atom"
    BOND = "bond"
    BRANCH_OPEN = "branch_open"
    BRANCH_CLOSE = "branch_close"
    RING = "ring"
    DOT = "dot"


@dataclass(frozen=True)
class AtomSpec:
    """Token de átomo ya decodificado."""
    element: str
    aromatic: bool = False
    bracket: bool = False
    isotope: Optional[int] = None
    hydrogens: Optional[int] = None
    charge: int = 0
    chirality: ChiralClass = ChiralClass.NONE
    atom_class: Optional[int] = None


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int
    atom: Optional[AtomSpec] = None
    order: Optional[BondOrder] = None
    direction: BondDirection = BondDirection.NONE
    ring_label: Optional[int] = None


# carácter -> (orden, dirección)
BOND_TOKENS = {
    "-": (BondOrder.SINGLE, BondDirection.NONE),
    "=": (BondOrder.DOUBLE, BondDirection.NONE),
    "#": (BondOrder.TRIPLE, BondDirection.NONE),
    ":": (BondOrder.AROMATIC, BondDirection.NONE),
    "/": (BondOrder.SINGLE, BondDirection.UP),
    "\\": (BondOrder.SINGLE, BondDirection.DOWN),
}

_TWO_LETTER_ORGANIC = ("Cl", "Br")
_BARE_AROMATIC = frozenset({"b", "c", "n", "o", "p", "s"})


class _Cursor:
    """Cursor de caracteres con anticipación de un paso."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[str]:
        index = self.pos + offset
        if index >= len(self.text):
            return None
        return self.text[index]

    def next(self) -> Optional[str]:
        char = self.peek()
        if char is not None:
            self.pos += 1
        return char

    def read_digits(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isdigit():
            self.pos += 1
        return self.text[start:self.pos]

    def eof(self) -> bool:
        return self.pos >= len(self.text)


def tokenize(notation: str) -> List[Token]:
    """Divide una cadena de notación en tokens.

    Args:
        notation: Cadena de notación lineal.

    Returns:
        Lista de tokens en orden de lectura.

    Raises:
        NotationSyntaxError: Token mal formado o carácter inesperado.
        UnsupportedAtomError: Elemento desconocido, o elemento fuera del
            subconjunto orgánico escrito sin corchetes.
    """
    cursor = _Cursor(notation)
    tokens: List[Token] = []
    while not cursor.eof():
        start = cursor.pos
        char = cursor.peek()
        if char == "[":
            tokens.append(_read_bracket_atom(cursor))
        elif char in BOND_TOKENS:
            cursor.next()
            order, direction = BOND_TOKENS[char]
            tokens.append(Token(TokenKind.BOND, char, start, order=order, direction=direction))
        elif char == "(":
            cursor.next()
            tokens.append(Token(TokenKind.BRANCH_OPEN, char, start))
        elif char == ")":
            cursor.next()
            tokens.append(Token(TokenKind.BRANCH_CLOSE, char, start))
        elif char == ".":
            cursor.next()
            tokens.append(Token(TokenKind.DOT, char, start))
        elif char.isdigit():
            cursor.next()
            tokens.append(Token(TokenKind.RING, char, start, ring_label=int(char)))
        elif char == "%":
            cursor.next()
            digits = cursor.peek(0), cursor.peek(1)
            if not all(d is not None and d.isdigit() for d in digits):
                raise NotationSyntaxError("Expected two digits after '%'", start)
            cursor.pos += 2
            text = notation[start:cursor.pos]
            tokens.append(Token(TokenKind.RING, text, start, ring_label=int(text[1:])))
        elif char.isalpha() or char == "*":
            tokens.append(_read_bare_atom(cursor))
        elif char == "$":
            raise NotationSyntaxError("Quadruple bonds are not supported", start)
        else:
            raise NotationSyntaxError(f"Unexpected character {char!r}", start)
    return tokens


def _read_bare_atom(cursor: _Cursor) -> Token:
    start = cursor.pos
    char = cursor.next()
    pair = char + (cursor.peek() or "")
    if pair in _TWO_LETTER_ORGANIC:
        cursor.next()
        return Token(TokenKind.ATOM, pair, start, atom=AtomSpec(element=pair))
    if char in ORGANIC_SUBSET:
        return Token(TokenKind.ATOM, char, start, atom=AtomSpec(element=char))
    if char in _BARE_AROMATIC:
        spec = AtomSpec(element=AROMATIC_SYMBOLS[char], aromatic=True)
        return Token(TokenKind.ATOM, char, start, atom=spec)
    if pair in ATOMIC_NUMBERS or char in ATOMIC_NUMBERS:
        symbol = pair if pair in ATOMIC_NUMBERS else char
        raise UnsupportedAtomError(f"Element {symbol} must be written in brackets", start)
    raise UnsupportedAtomError(f"Unknown atom symbol {char!r}", start)


def _read_bracket_atom(cursor: _Cursor) -> Token:
    start = cursor.pos
    cursor.next()  # '['
    isotope_text = cursor.read_digits()
    isotope = int(isotope_text) if isotope_text else None

    element, aromatic = _read_element(cursor)

    chirality = ChiralClass.NONE
    if cursor.peek() == "@":
        chirality = _read_chirality(cursor)

    hydrogens: Optional[int] = None
    if cursor.peek() == "H":
        cursor.next()
        count = cursor.read_digits()
        hydrogens = int(count) if count else 1

    charge = 0
    sign = cursor.peek()
    if sign in ("+", "-"):
        charge = _read_charge(cursor)

    atom_class: Optional[int] = None
    if cursor.peek() == ":":
        cursor.next()
        digits = cursor.read_digits()
        if not digits:
            raise NotationSyntaxError("Expected atom class digits after ':'", cursor.pos)
        atom_class = int(digits)

    closing = cursor.next()
    if closing != "]":
        if closing is None:
            raise NotationSyntaxError("Unterminated bracket atom", start)
        raise NotationSyntaxError(f"Unexpected {closing!r} inside bracket atom", cursor.pos - 1)

    spec = AtomSpec(
        element=element,
        aromatic=aromatic,
        bracket=True,
        isotope=isotope,
        hydrogens=hydrogens if hydrogens is not None else 0,
        charge=charge,
        chirality=chirality,
        atom_class=atom_class,
    )
    return Token(TokenKind.ATOM, cursor.text[start:cursor.pos], start, atom=spec)


def _read_element(cursor: _Cursor) -> tuple[str, bool]:
    position = cursor.pos
    first = cursor.peek()
    if first is None or not first.isalpha():
        raise NotationSyntaxError("Expected element symbol in bracket atom", position)
    second = cursor.peek(1) or ""
    if first.islower():
        pair = first + second
        if pair in AROMATIC_SYMBOLS:
            cursor.pos += 2
            return AROMATIC_SYMBOLS[pair], True
        if first in AROMATIC_SYMBOLS:
            cursor.pos += 1
            return AROMATIC_SYMBOLS[first], True
        raise UnsupportedAtomError(f"Unknown aromatic symbol {first!r}", position)
    pair = first + second
    if second.islower() and pair in ATOMIC_NUMBERS:
        cursor.pos += 2
        return pair, False
    if first in ATOMIC_NUMBERS:
        cursor.pos += 1
        return first, False
    symbol = pair if second.islower() else first
    raise UnsupportedAtomError(f"Unknown element {symbol!r}", position)


def _read_chirality(cursor: _Cursor) -> ChiralClass:
    position = cursor.pos
    cursor.next()  # '@'
    if cursor.peek() == "@":
        cursor.next()
        return ChiralClass.CLOCKWISE
    if cursor.peek() == "T" and cursor.peek(1) == "H":
        cursor.pos += 2
        digit = cursor.next()
        if digit == "1":
            return ChiralClass.ANTICLOCKWISE
        if digit == "2":
            return ChiralClass.CLOCKWISE
        raise NotationSyntaxError("Expected @TH1 or @TH2", position)
    if cursor.peek() in ("A", "S", "T", "O"):
        raise NotationSyntaxError("Only tetrahedral chirality classes are supported", position)
    return ChiralClass.ANTICLOCKWISE


def _read_charge(cursor: _Cursor) -> int:
    sign_char = cursor.next()
    sign = 1 if sign_char == "+" else -1
    digits = cursor.read_digits()
    if digits:
        return sign * int(digits)
    magnitude = 1
    while cursor.peek() == sign_char:
        cursor.next()
        magnitude += 1
    return sign * magnitude
