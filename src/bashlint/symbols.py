"""Symbol table for declared shell variables and functions.

Usage detection is a plain substring test on the trimmed line: ``$NAME`` or
``${NAME}`` for variables and ``NAME(`` for functions. References inside
strings or comments count, indirect references (eval, ``${!ref}``) do not.
"""

import re
from dataclasses import dataclass
from enum import Enum

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class SymbolKind(str, Enum):
    VARIABLE = "variable"
    FUNCTION = "function"


@dataclass(slots=True)
class Symbol:
    """
    A declared variable or function.

    Attributes:
        name: Identifier as written in the script
        kind: Variable or function
        used: True once a later line references the symbol
        declared_line: Line of the most recent declaration
    """

    name: str
    kind: SymbolKind
    used: bool = False
    declared_line: int | None = None


def is_valid_identifier(name: str) -> bool:
    """
    Check shell identifier syntax.

    Examples:
        >>> is_valid_identifier("FOO_1")
        True
        >>> is_valid_identifier("echo a")
        False
    """
    return IDENTIFIER_PATTERN.match(name) is not None


class SymbolTable:
    """Declared symbols of one lint run, keyed by (kind, name)."""

    def __init__(self) -> None:
        self._symbols: dict[tuple[SymbolKind, str], Symbol] = {}

    def __len__(self) -> int:
        return len(self._symbols)

    def get(self, name: str, kind: SymbolKind) -> Symbol | None:
        return self._symbols.get((kind, name))

    def declare(self, name: str, kind: SymbolKind, line_number: int | None = None) -> Symbol:
        """
        Insert a symbol, or reset an existing one to unused.

        A re-declaration discards any usage seen before it, so a value that is
        reassigned and never read again is reported as unused.
        """
        symbol = Symbol(name=name, kind=kind, used=False, declared_line=line_number)
        self._symbols[(kind, name)] = symbol
        return symbol

    def mark_used(self, line_text: str, line_number: int | None = None) -> list[Symbol]:
        """
        Mark every symbol referenced by ``line_text`` as used.

        The line a symbol was declared on is not a usage of that symbol.

        Returns:
            Symbols newly marked as used
        """
        marked = []
        for symbol in self._symbols.values():
            if symbol.used or (line_number is not None and symbol.declared_line == line_number):
                continue
            if _references(line_text, symbol):
                symbol.used = True
                marked.append(symbol)
        return marked

    def unused_symbols(self, kind: SymbolKind | None = None) -> list[Symbol]:
        """Unused symbols sorted by kind then name."""
        unused = [
            symbol
            for symbol in self._symbols.values()
            if not symbol.used and (kind is None or symbol.kind is kind)
        ]
        return sorted(unused, key=lambda s: (s.kind is not SymbolKind.VARIABLE, s.name))


def _references(line_text: str, symbol: Symbol) -> bool:
    if symbol.kind is SymbolKind.VARIABLE:
        return f"${symbol.name}" in line_text or f"${{{symbol.name}}}" in line_text
    return f"{symbol.name}(" in line_text
