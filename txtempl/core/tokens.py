# txtempl/core/tokens.py
"""
Token types shared by the lexer and the renderer.
"""
from dataclasses import dataclass
from enum import Enum

END_OF_SETTINGS_MARKER = "end-of-settings!"
BODY_PUNCTUATORS = "{}$:"
# "\r" so CRLF header lines lex like LF ones.
HEADER_WHITESPACE = " \t\r"


class TokenKind(Enum):
    TEXT = "text"
    COLON = "colon"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    DOLLAR = "dollar"
    NEWLINE = "newline"
    END_OF_SETTINGS = "end_of_settings"
    # reserved, the lexer never emits it.
    IDENTIFIER = "identifier"


# single-character tokens, keyed by the character they stand for.
PUNCTUATOR_KINDS = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "$": TokenKind.DOLLAR,
    ":": TokenKind.COLON,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    content: str

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

