"""Lectura de la notación lineal a grafo molecular."""

from .parser import parse_molecule, parse_raw
from .tokens import AtomSpec, Token, TokenKind, tokenize

__all__ = [
    "parse_molecule",
    "parse_raw",
    "tokenize",
    "Token",
    "TokenKind",
    "AtomSpec",
]
