# txtempl/core/parser.py
"""
Interprets a token stream against a variable store.

Rendering runs in two passes. The first records ``name: value`` lines of the
settings header as SETTING variables. The second walks the body and resolves
placeholders:

    {name}              key
    {name:default}      key with a fallback
    ${name}             option, resolved through the constant it names
    ${name:default}     option with a fallback
    $name rest          constant, the identifier ends at the first space

Nothing here raises for bad input. A placeholder that cannot be resolved is
copied to the output as it was written and a :class:`Diagnostic` is recorded.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Union

import structlog

from .lexer import lex
from .tokens import Token, TokenKind
from .variables import Variable, VariableKind, VariableStore

SeedLike = Union[VariableStore, Mapping[str, Variable], None]

KEY_PATTERNS = (
    (TokenKind.LBRACE, TokenKind.TEXT, TokenKind.RBRACE),
    (TokenKind.LBRACE, TokenKind.TEXT, TokenKind.COLON, TokenKind.TEXT, TokenKind.RBRACE),
)
OPTION_PATTERNS = (
    (TokenKind.DOLLAR, TokenKind.LBRACE, TokenKind.TEXT, TokenKind.RBRACE),
    (TokenKind.DOLLAR, TokenKind.LBRACE, TokenKind.TEXT, TokenKind.COLON, TokenKind.TEXT, TokenKind.RBRACE),
)
_SETTING_LINE = (TokenKind.TEXT, TokenKind.COLON, TokenKind.TEXT, TokenKind.NEWLINE)


class DiagnosticKind(Enum):
    UNRESOLVED_KEY = "unresolved_key"
    KEY_DEFAULT_USED = "key_default_used"
    UNRESOLVED_OPTION = "unresolved_option"
    UNRESOLVED_OPTION_TARGET = "unresolved_option_target"
    OPTION_DEFAULT_USED = "option_default_used"
    UNRESOLVED_CONSTANT = "unresolved_constant"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    identifier: str
    message: str
    # index of the first token of the placeholder in the token list.
    position: int


@dataclass
class RenderResult:
    text: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    store: VariableStore = field(default_factory=VariableStore)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def settings(self) -> Dict[str, str]:
        return self.store.settings

    @property
    def language(self) -> Optional[str]:
        return self.store.language


class TokenCursor:
    """Bounds-checked lookahead over a token sequence."""

    def __init__(self, tokens: Sequence[Token], index: int = 0):
        self.tokens = tokens
        self.index = index

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def peek(self, offset: int = 0) -> Optional[Token]:
        position = self.index + offset
        if 0 <= position < len(self.tokens):
            return self.tokens[position]
        return None

    def match(self, *kinds: TokenKind) -> Optional[List[Token]]:
        # returns the matched tokens when the next len(kinds) tokens have exactly these kinds.
        span: List[Token] = []
        for offset, kind in enumerate(kinds):
            token = self.peek(offset)
            if token is None or token.kind != kind:
                return None
            span.append(token)
        return span

    def match_any(self, *patterns: Sequence[TokenKind]) -> Optional[List[Token]]:
        for pattern in patterns:
            span = self.match(*pattern)
            if span is not None:
                return span
        return None

    def advance(self, count: int = 1) -> None:
        self.index += count


def _literal(span: Sequence[Token]) -> str:
    return "".join(token.content for token in span)


def _seed_store(seed: SeedLike) -> VariableStore:
    if seed is None:
        return VariableStore()
    if isinstance(seed, VariableStore):
        return seed.copy()
    store = VariableStore()
    for name, variable in seed.items():
        store.set(name, variable)
    return store


class Renderer:
    """Renders one token list. Owns a private copy of the seed store."""

    def __init__(self, tokens: Sequence[Token], seed: SeedLike = None):
        self.cursor = TokenCursor(tokens)
        self.store = _seed_store(seed)
        self.diagnostics: List[Diagnostic] = []
        self._output: List[str] = []
        self.log = structlog.wrap_logger(logging.getLogger(f"{__name__}.{self.__class__.__name__}"))

    def run(self) -> RenderResult:
        self._ingest_settings()
        self._render_body()
        text = "".join(self._output)
        self.log.debug("template_rendered", output_length=len(text), diagnostics=len(self.diagnostics))
        return RenderResult(text=text, diagnostics=self.diagnostics, store=self.store)

    def _diagnose(self, kind: DiagnosticKind, identifier: str, message: str, position: int) -> None:
        self.diagnostics.append(Diagnostic(kind, identifier, message, position))
        self.log.debug("placeholder_diagnostic", kind=kind.value, identifier=identifier, position=position)

    # pass 1

    def _ingest_settings(self) -> None:
        cursor = self.cursor
        if not any(token.kind is TokenKind.END_OF_SETTINGS for token in cursor.tokens):
            return
        while not cursor.at_end:
            if cursor.peek().kind is TokenKind.END_OF_SETTINGS:
                cursor.advance()
                return
            line = cursor.match(*_SETTING_LINE)
            if line is not None and not line[0].is_blank and not line[2].is_blank:
                name, value = line[0].content.strip(), line[2].content.strip()
                self.store.set(name, Variable(VariableKind.SETTING, value))
                self.log.debug("setting_recorded", name=name, value=value)
            cursor.advance()

    # pass 2

    def _render_body(self) -> None:
        cursor = self.cursor
        while not cursor.at_end:
            if self._render_key() or self._render_option() or self._render_constant():
                continue
            self._output.append(cursor.peek().content)
            cursor.advance()

    def _render_key(self) -> bool:
        span = self.cursor.match_any(*KEY_PATTERNS)
        if span is None:
            return False
        position = self.cursor.index
        name = span[1].content.strip()
        default = span[3].content.strip() if len(span) == 5 else None

        key = self.store.get(name, VariableKind.KEY)
        if key is not None:
            self._output.append(key.value)
        elif default is not None:
            self._output.append(default)
            self._diagnose(DiagnosticKind.KEY_DEFAULT_USED, name,
                           f"Key '{name}' not set, using default '{default}'", position)
        else:
            self._output.append(_literal(span))
            self._diagnose(DiagnosticKind.UNRESOLVED_KEY, name, f"Key '{name}' not set", position)
        self.cursor.advance(len(span))
        return True

    def _render_option(self) -> bool:
        span = self.cursor.match_any(*OPTION_PATTERNS)
        if span is None:
            return False
        position = self.cursor.index
        name = span[2].content.strip()
        default = span[4].content.strip() if len(span) == 6 else None

        option = self.store.get(name, VariableKind.OPTION)
        constant = self.store.get(option.value, VariableKind.CONSTANT) if option is not None else None
        if constant is not None:
            self._output.append(constant.value)
        elif default is not None:
            self._output.append(default)
            if option is None:
                message = f"Option '{name}' not set, using default '{default}'"
            else:
                message = f"Constant '{option.value}' for option '{name}' not set, using default '{default}'"
            self._diagnose(DiagnosticKind.OPTION_DEFAULT_USED, name, message, position)
        elif option is None:
            self._output.append(_literal(span))
            self._diagnose(DiagnosticKind.UNRESOLVED_OPTION, name, f"Option '{name}' not set", position)
        else:
            self._output.append(_literal(span))
            self._diagnose(DiagnosticKind.UNRESOLVED_OPTION_TARGET, name,
                           f"Constant '{option.value}' for option '{name}' not set", position)
        self.cursor.advance(len(span))
        return True

    def _render_constant(self) -> bool:
        span = self.cursor.match(TokenKind.DOLLAR, TokenKind.TEXT)
        if span is None:
            return False
        text = span[1].content
        space_at = text.find(" ")
        if space_at <= 0:
            # no identifier followed by a space; the '$' is left as plain text.
            return False
        position = self.cursor.index
        name = text[:space_at]

        constant = self.store.get(name, VariableKind.CONSTANT)
        if constant is not None:
            self._output.append(constant.value + text[space_at:])
        else:
            self._output.append(_literal(span))
            self._diagnose(DiagnosticKind.UNRESOLVED_CONSTANT, name, f"Constant '{name}' not set", position)
        self.cursor.advance(len(span))
        return True


def render(tokens: Sequence[Token], seed: SeedLike = None) -> RenderResult:
    """Renders ``tokens`` against a copy of ``seed``; ``seed`` itself is never modified."""
    return Renderer(tokens, seed).run()


def render_template(template_text: str, seed: SeedLike = None) -> RenderResult:
    """Lexes and renders ``template_text`` in one call."""
    return render(lex(template_text), seed)
