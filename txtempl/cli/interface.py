# txtempl/cli/interface.py
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import click
import toml
from click_option_group import optgroup
import structlog

from txtempl import __version__ as app_version
from txtempl.config.settings import RenderConfig
from txtempl.config.loader import (
    build_seed_store, load_and_merge_configs, parse_assignments,
    resolve_seed_tables, save_config_to_profile,
)
from txtempl.core.draft import draft_seed
from txtempl.core.lexer import lex
from txtempl.core.parser import RenderResult, render
from txtempl.exceptions import TemplateError, TxtTemplError
from txtempl.logging_setup import configure_logging

from .console_output import print_diagnostics, print_token_table
from .output import copy_to_clipboard, encode_base64, write_to_file, write_to_stdout

log = structlog.get_logger(__name__)

STRICT_FAILURE_EXIT_CODE = 2

TEMPLATE_ARGUMENT_TYPE = click.Path(exists=True, dir_okay=False, readable=True, allow_dash=True, path_type=Path)


@contextmanager
def _cli_error_boundary() -> Iterator[None]:
    try:
        yield
    except click.exceptions.Exit:
        raise
    except TxtTemplError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException:
        raise
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)


def _read_template(config: RenderConfig) -> str:
    if config.read_from_stdin:
        log.info("reading_template_from_stdin")
        return click.get_text_stream("stdin").read()
    log.info("reading_template_from_file", path=str(config.template_path))
    try:
        return config.template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"Failed to read template file {config.template_path}: {e}") from e


def _build_render_config(template_path: Optional[Path], cli_params: Dict[str, Any]) -> RenderConfig:
    # layers: config files < selected profile < command line.
    raw_configs_from_toml_files = load_and_merge_configs()
    tables = resolve_seed_tables(raw_configs_from_toml_files, cli_params.get("active_config_profile_name"))
    tables["constants"].update(parse_assignments(cli_params.get("constant_pairs") or (), "--const"))
    tables["options"].update(parse_assignments(cli_params.get("option_pairs") or (), "--option"))
    tables["keys"].update(parse_assignments(cli_params.get("key_pairs") or (), "--key"))

    return RenderConfig(
        template_path=template_path,
        constants=tables["constants"],
        options=tables["options"],
        keys=tables["keys"],
        output_file=cli_params.get("output_file"),
        clipboard=cli_params.get("clipboard", False),
        base64_output=cli_params.get("base64_output", False),
        strict=cli_params.get("strict", False),
        quiet=cli_params.get("quiet", False),
        save_profile_name=cli_params.get("save_profile_name"),
    )


def _run_render_flow(config: RenderConfig) -> RenderResult:
    log.info("render_orchestration_started", template=str(config.template_path or "<stdin>"))
    tokens = lex(_read_template(config))
    result = render(tokens, build_seed_store(config))
    log.info("render_complete", diagnostics=len(result.diagnostics), language=result.language)

    output_to_write = encode_base64(result.text) + "\n" if config.base64_output else result.text

    output_destination_used = False
    if config.output_file:
        write_to_file(config.output_file, output_to_write)
        if not config.quiet:
            click.echo(f"Info: Output written to: {config.output_file}", err=True)
        output_destination_used = True

    clipboard_copy_succeeded = False
    if config.clipboard:
        clipboard_copy_succeeded = copy_to_clipboard(output_to_write)
        output_destination_used = True

    if not output_destination_used or (config.clipboard and not clipboard_copy_succeeded):
        if config.clipboard and not clipboard_copy_succeeded:
            click.echo("Info: Clipboard copy failed. Outputting to stdout instead.", err=True)
        log.info("writing_final_output_to_stdout")
        write_to_stdout(output_to_write)

    if not config.quiet:
        print_diagnostics(result.diagnostics)
    return result


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, prog_name="txtempl", help="Show version and exit.")
def main_cli_group(verbosity_level: int, force_json_logs: bool):
    """txtempl: render text templates with a settings header and
    {key}, ${option} and $constant placeholders."""
    log_level = "warning"
    if verbosity_level == 1: log_level = "info"
    elif verbosity_level >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=force_json_logs)


@main_cli_group.command("render")
@click.argument("template_path", required=False, default=None, type=TEMPLATE_ARGUMENT_TYPE)
@optgroup.group("Seed Variables", help="Values placeholders are resolved against.")
@optgroup.option("--const", "constant_pairs", multiple=True, metavar="NAME=VALUE", help="Define a constant, used by $name and by options.")
@optgroup.option("--option", "option_pairs", multiple=True, metavar="NAME=CONSTANT", help="Define an option pointing at a constant, used by ${name}.")
@optgroup.option("--key", "key_pairs", multiple=True, metavar="NAME=VALUE", help="Define a key, used by {name}.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save the seed variables to a profile in .txtempl.toml and exit.")
@optgroup.group("Output Options", help="Where and how the rendered text is written.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the output to.")
@optgroup.option("--clipboard", "clipboard", is_flag=True, default=False, help="Copy output to clipboard.")
@optgroup.option("--base64", "base64_output", is_flag=True, default=False, help="Base64 encode the rendered text.")
@optgroup.option("--strict", "strict", is_flag=True, default=False, help=f"Exit with code {STRICT_FAILURE_EXIT_CODE} if any placeholder needed a fallback.")
@optgroup.option("-q", "--quiet", "quiet", is_flag=True, default=False, help="Do not print diagnostics to stderr.")
@click.pass_context
def render_command(ctx: click.Context, template_path: Optional[Path], **cli_params: Any):
    """Render TEMPLATE (a file, or '-' / nothing for stdin)."""
    log.debug("render_command_invoked", template=str(template_path), params=cli_params)
    with _cli_error_boundary():
        config = _build_render_config(template_path, cli_params)

        if config.save_profile_name:
            if save_config_to_profile(config, config.save_profile_name):
                click.echo(f"Info: Saved seed variables to profile '{config.save_profile_name}'.", err=True)
            else:
                click.echo("Info: No seed variables given, nothing saved.", err=True)
            ctx.exit(0)

        result = _run_render_flow(config)
        if config.strict and not result.ok:
            log.info("strict_mode_failure", diagnostics=len(result.diagnostics))
            ctx.exit(STRICT_FAILURE_EXIT_CODE)


@main_cli_group.command("tokens")
@click.argument("template_path", required=False, default=None, type=TEMPLATE_ARGUMENT_TYPE)
def tokens_command(template_path: Optional[Path]):
    """Print the token stream of TEMPLATE."""
    with _cli_error_boundary():
        tokens = lex(_read_template(RenderConfig(template_path=template_path)))
        print_token_table(tokens)


@main_cli_group.command("draft")
@click.argument("template_path", required=False, default=None, type=TEMPLATE_ARGUMENT_TYPE)
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write the skeleton to a file instead of stdout.")
def draft_command(template_path: Optional[Path], output_file: Optional[Path]):
    """Print a TOML seed skeleton listing the placeholders TEMPLATE uses."""
    with _cli_error_boundary():
        tokens = lex(_read_template(RenderConfig(template_path=template_path)))
        skeleton = toml.dumps(draft_seed(tokens))
        if output_file:
            write_to_file(output_file, skeleton)
        else:
            write_to_stdout(skeleton)
