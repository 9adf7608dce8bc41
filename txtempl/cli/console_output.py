# txtempl/cli/console_output.py
"""
Console feedback for the CLI: diagnostics on stderr and the token table
printed by `txtempl tokens`.
"""
from typing import Sequence

import click
from rich.console import Console as RichConsole
from rich.table import Table
import structlog

from txtempl.core.parser import Diagnostic, DiagnosticKind
from txtempl.core.tokens import Token

log = structlog.get_logger(__name__)

# a default was substituted, so the output is complete but may not be what was intended.
_FALLBACK_KINDS = {DiagnosticKind.KEY_DEFAULT_USED, DiagnosticKind.OPTION_DEFAULT_USED}


def print_diagnostics(diagnostics: Sequence[Diagnostic]):
    log.debug("console_diagnostics_output_requested", count=len(diagnostics))
    for diagnostic in diagnostics:
        if diagnostic.kind in _FALLBACK_KINDS:
            click.secho(f"Info: {diagnostic.message}", fg="cyan", err=True)
        else:
            click.secho(f"Warning: {diagnostic.message}", fg="yellow", err=True)
    if diagnostics:
        click.echo(f"{len(diagnostics)} placeholder diagnostic(s) reported.", err=True)


def print_token_table(tokens: Sequence[Token]):
    table = Table(title=f"{len(tokens)} tokens", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("kind", style="cyan")
    table.add_column("content", overflow="fold")
    for index, token in enumerate(tokens):
        table.add_row(str(index), token.kind.name, repr(token.content))
    RichConsole(highlight=False).print(table)
