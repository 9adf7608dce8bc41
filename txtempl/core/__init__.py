# txtempl/core/__init__.py
"""
Core lexer/renderer pipeline for txtempl.

lex() turns template text into tokens, render() resolves those tokens
against a VariableStore and draft() lists the placeholders a template needs.
"""
from .lexer import lex
from .parser import render, render_template
from .draft import draft, draft_seed

__all__ = ["lex", "render", "render_template", "draft", "draft_seed"]
