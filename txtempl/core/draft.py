# txtempl/core/draft.py
"""
Lists the placeholders a template expects, so a caller can prepare a seed
store before rendering.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .parser import TokenCursor, KEY_PATTERNS, OPTION_PATTERNS
from .tokens import Token, TokenKind
from .variables import VariableKind

_SEED_TABLES = {
    VariableKind.CONSTANT: "constants",
    VariableKind.OPTION: "options",
    VariableKind.KEY: "keys",
}


@dataclass(frozen=True)
class Placeholder:
    name: str
    kind: VariableKind
    default: Optional[str] = None


def _body_start(tokens: Sequence[Token]) -> int:
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.END_OF_SETTINGS:
            return index + 1
    return 0


def draft(tokens: Sequence[Token]) -> List[Placeholder]:
    """Returns the body placeholders in first-seen order, one entry per (name, kind)."""
    cursor = TokenCursor(tokens, _body_start(tokens))
    found: List[Placeholder] = []
    seen = set()

    def note(name: str, kind: VariableKind, default: Optional[str]) -> None:
        if name and (name, kind) not in seen:
            seen.add((name, kind))
            found.append(Placeholder(name, kind, default))

    while not cursor.at_end:
        span = cursor.match_any(*KEY_PATTERNS)
        if span is not None:
            note(span[1].content.strip(), VariableKind.KEY, span[3].content.strip() if len(span) == 5 else None)
            cursor.advance(len(span))
            continue
        span = cursor.match_any(*OPTION_PATTERNS)
        if span is not None:
            note(span[2].content.strip(), VariableKind.OPTION, span[4].content.strip() if len(span) == 6 else None)
            cursor.advance(len(span))
            continue
        span = cursor.match(TokenKind.DOLLAR, TokenKind.TEXT)
        if span is not None and span[1].content.find(" ") > 0:
            note(span[1].content.split(" ", 1)[0], VariableKind.CONSTANT, None)
            cursor.advance(len(span))
            continue
        cursor.advance()
    return found


def draft_seed(tokens: Sequence[Token]) -> Dict[str, Dict[str, str]]:
    """
    Builds an empty seed skeleton for the template, grouped the way the
    configuration files group variables. Options are listed with their own
    name as target and that constant is added too, since an option resolves
    through a constant.
    """
    seed: Dict[str, Dict[str, str]] = {table: {} for table in _SEED_TABLES.values()}
    pending: List[Tuple[str, VariableKind, str]] = []
    for placeholder in draft(tokens):
        value = placeholder.default or ""
        if placeholder.kind is VariableKind.OPTION:
            pending.append((placeholder.name, VariableKind.OPTION, placeholder.name))
            pending.append((placeholder.name, VariableKind.CONSTANT, value))
        else:
            pending.append((placeholder.name, placeholder.kind, value))
    for name, kind, value in pending:
        seed[_SEED_TABLES[kind]].setdefault(name, value)
    return seed
