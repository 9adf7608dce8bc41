# txtempl/cli/__init__.py
"""Command line interface for txtempl."""
from .interface import main_cli_group

__all__ = ["main_cli_group"]
