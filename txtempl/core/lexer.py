# txtempl/core/lexer.py
"""
Turns raw template text into a flat list of tokens.

The lexer has two modes. While a settings header is being read, whitespace is
dropped and only ``:`` and newlines are significant. Once the
``end-of-settings!`` marker has been matched as a whole word the rest of that
line is skipped and the body is split on the ``{ } $ :`` punctuators, keeping
every character so that concatenating the body tokens gives back the input.
"""
import logging
from typing import List, Optional

import structlog

from .tokens import (
    BODY_PUNCTUATORS,
    END_OF_SETTINGS_MARKER,
    HEADER_WHITESPACE,
    PUNCTUATOR_KINDS,
    Token,
    TokenKind,
)

# stdlib-backed, so nothing is written until the application configures logging.
log = structlog.wrap_logger(logging.getLogger(__name__))

_HEADER_BREAKS = HEADER_WHITESPACE + ":\n"


class Lexer:
    """Single-use tokenizer over one template string."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def _emit(self, kind: TokenKind, content: str) -> None:
        self.tokens.append(Token(kind, content))

    def tokenize(self) -> List[Token]:
        if END_OF_SETTINGS_MARKER in self.source and not self._lex_settings():
            # marker text occurs but never as a complete header word.
            log.warning("settings_header_not_closed_lexing_as_body", source_length=len(self.source))
            self.tokens = []
            self.pos = 0
        self._lex_body()
        log.debug("template_lexed", source_length=len(self.source), token_count=len(self.tokens))
        return self.tokens

    def _lex_settings(self) -> bool:
        """Reads header tokens. Returns True once the marker has been consumed."""
        src = self.source
        length = len(src)
        run_start = self.pos
        while True:
            char: Optional[str] = src[self.pos] if self.pos < length else None
            if char is not None and char not in _HEADER_BREAKS:
                self.pos += 1
                continue

            if run_start < self.pos:
                run = src[run_start:self.pos]
                if run == END_OF_SETTINGS_MARKER:
                    self._emit(TokenKind.END_OF_SETTINGS, run)
                    newline_at = src.find("\n", self.pos)
                    self.pos = length if newline_at == -1 else newline_at + 1
                    return True
                self._emit(TokenKind.TEXT, run)

            if char is None:
                return False
            if char == ":":
                self._emit(TokenKind.COLON, char)
            elif char == "\n":
                self._emit(TokenKind.NEWLINE, char)
            self.pos += 1
            run_start = self.pos

    def _lex_body(self) -> None:
        src = self.source
        run_start = self.pos
        for index in range(self.pos, len(src)):
            char = src[index]
            if char not in BODY_PUNCTUATORS:
                continue
            if run_start < index:
                self._emit(TokenKind.TEXT, src[run_start:index])
            self._emit(PUNCTUATOR_KINDS[char], char)
            run_start = index + 1
        if run_start < len(src):
            self._emit(TokenKind.TEXT, src[run_start:])
        self.pos = len(src)


def lex(template_text: str) -> List[Token]:
    """Tokenizes ``template_text`` and returns the token list."""
    return Lexer(template_text).tokenize()
