"""Lookup placeholder grammar.

Templates are literal text interleaved with placeholders of the form::

    {{ lookup('<kind>', '<path>') }}

Whitespace is allowed around every token. ``kind`` is a word, ``path`` is
made of word characters, ``/``, ``:``, ``.`` and ``-`` so it can address the
dotted key paths of flattened release values. Anything that does not match
the grammar is kept as literal text.

Parsing is separate from substitution: :func:`tokenize` produces literal
strings and :class:`LookupPlaceholder` tokens, and :func:`render` asks a
resolver callback for the value of each placeholder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

OPEN = "{{"
CLOSE = "}}"
FUNCTION = "lookup"


class LookupKind(str, Enum):
    """Placeholder kinds understood by the credential resolver."""

    VALUE = "value"
    USERNAME = "username"
    PASSWORD = "password"
    CLUSTER = "cluster"
    ENV = "env"


@dataclass(frozen=True)
class LookupPlaceholder:
    """A parsed ``lookup`` call.

    ``kind`` is lowercased; unknown kinds are kept so the resolver can
    expand them to an empty string.
    """

    kind: str
    path: str


Token = str | LookupPlaceholder
Resolver = Callable[[LookupPlaceholder], str]


class _Cursor:
    def __init__(self, text: str, pos: int) -> None:
        self.text = text
        self.pos = pos

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, literal: str) -> bool:
        self.skip_ws()
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def quoted(self, allowed: Callable[[str], bool]) -> str | None:
        if not self.expect("'"):
            return None
        start = self.pos
        while self.pos < len(self.text) and allowed(self.text[self.pos]):
            self.pos += 1
        value = self.text[start : self.pos]
        if not value or not self.text.startswith("'", self.pos):
            return None
        self.pos += 1
        return value


def _is_kind_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def _is_path_char(c: str) -> bool:
    return _is_kind_char(c) or c in "/:.-"


def _parse_at(text: str, pos: int) -> tuple[LookupPlaceholder, int] | None:
    """Parse a placeholder starting at ``pos``; return it and the end offset."""
    cursor = _Cursor(text, pos)
    if not cursor.expect(OPEN) or not cursor.expect(FUNCTION) or not cursor.expect("("):
        return None

    kind = cursor.quoted(_is_kind_char)
    if kind is None or not cursor.expect(","):
        return None

    path = cursor.quoted(_is_path_char)
    if path is None or not cursor.expect(")") or not cursor.expect(CLOSE):
        return None

    return LookupPlaceholder(kind=kind.lower(), path=path), cursor.pos


def tokenize(template: str) -> list[Token]:
    """Split a template into literal text and placeholders."""
    tokens: list[Token] = []
    literal: list[str] = []
    pos = 0

    while pos < len(template):
        start = template.find(OPEN, pos)
        if start < 0:
            literal.append(template[pos:])
            break

        literal.append(template[pos:start])
        parsed = _parse_at(template, start)
        if parsed is None:
            literal.append(template[start])
            pos = start + 1
            continue

        placeholder, pos = parsed
        if any(literal):
            tokens.append("".join(literal))
        literal = []
        tokens.append(placeholder)

    if any(literal):
        tokens.append("".join(literal))
    return tokens


def render(template: str, resolver: Resolver) -> str:
    """Substitute every placeholder in ``template`` using ``resolver``."""
    return "".join(
        token if isinstance(token, str) else resolver(token)
        for token in tokenize(template)
    )
