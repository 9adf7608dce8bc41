"""
txtempl: a small text-template engine with a settings header and
key, option and constant placeholders.
"""
import logging

__version__ = "0.3.0"

# library use stays silent until the command line configures logging.
logging.getLogger("txtempl").addHandler(logging.NullHandler())

from txtempl.core.tokens import Token, TokenKind
from txtempl.core.variables import Variable, VariableKind, VariableStore
from txtempl.core.lexer import lex
from txtempl.core.parser import Diagnostic, DiagnosticKind, RenderResult, render, render_template
from txtempl.core.draft import Placeholder, draft, draft_seed

__all__ = [
    "__version__",
    "Token", "TokenKind",
    "Variable", "VariableKind", "VariableStore",
    "lex",
    "Diagnostic", "DiagnosticKind", "RenderResult", "render", "render_template",
    "Placeholder", "draft", "draft_seed",
]
