# txtempl/config/loader.py
"""
Loads seed variables from TOML files and saves them back as profiles.

Files are read from the user config directory first and then from the first
project file found in the working directory, so project values win. A file
holds up to three tables, ``[constants]``, ``[options]`` and ``[keys]``, plus
named variants of them under ``[profiles.<name>]``.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import structlog

from txtempl.core.variables import VariableStore
from txtempl.exceptions import ConfigError

from .settings import RenderConfig, DEFAULT_PROFILE_NAME

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".txtempl.toml", "txtempl.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "txtempl"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"
SEED_TABLES = ("constants", "options", "keys")


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Could not parse config file {file_path}: {e}") from e
    return data.get("tool", {}).get("txtempl", {}) if file_path.name == "pyproject.toml" else data


def _merge_into(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    # seed tables and profiles merge key by key, anything else is replaced.
    for key, value in source.items():
        if key in SEED_TABLES + ("profiles",) and isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key].update(value)
        else:
            target[key] = value


def load_and_merge_configs(base_dir: Optional[Path] = None) -> Dict[str, Any]:
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        _merge_into(merged_toml_data, _load_toml_file_data(USER_CONFIG_FILE))

    search_dir = base_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = search_dir / filename
        if candidate.is_file():
            log.info("loading_project_local_config", path=str(candidate))
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                _merge_into(merged_toml_data, project_settings)
                log.debug("project_config_applied", source_file=str(candidate))
                break
    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data


def _as_string_table(table_name: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigError(f"Config table '{table_name}' must be a table of name = value pairs.")
    table: Dict[str, str] = {}
    for name, entry in value.items():
        if isinstance(entry, (dict, list)):
            raise ConfigError(f"Value of '{table_name}.{name}' must be a string, number or boolean.")
        table[str(name)] = str(entry).lower() if isinstance(entry, bool) else str(entry)
    return table


def resolve_seed_tables(raw_config: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Dict[str, str]]:
    """Returns the constants/options/keys tables with the named profile applied on top."""
    tables = {name: _as_string_table(name, raw_config.get(name, {})) for name in SEED_TABLES}
    if profile_name and profile_name.upper() != DEFAULT_PROFILE_NAME:
        profiles = raw_config.get("profiles", {})
        if not isinstance(profiles, dict):
            raise ConfigError("Config entry 'profiles' must be a table of named profiles.")
        profile = profiles.get(profile_name)
        if profile is None:
            log.warning("profile_not_found_in_config_files", profile_name=profile_name)
        elif not isinstance(profile, dict):
            raise ConfigError(f"Profile 'profiles.{profile_name}' must be a table.")
        else:
            log.info("applying_profile_settings", profile=profile_name)
            for name in SEED_TABLES:
                tables[name].update(_as_string_table(f"profiles.{profile_name}.{name}", profile.get(name, {})))
    return tables


def parse_assignments(pairs: Iterable[str], flag: str) -> Dict[str, str]:
    """Parses ``NAME=VALUE`` strings from the command line."""
    parsed: Dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid value for {flag}: '{pair}' (expected NAME=VALUE).")
        parsed[name.strip()] = value
    return parsed


def build_seed_store(config: RenderConfig) -> VariableStore:
    store = VariableStore.from_mappings(constants=config.constants, options=config.options, keys=config.keys)
    log.debug("seed_store_built", constants=len(config.constants), options=len(config.options), keys=len(config.keys))
    return store


def save_config_to_profile(config_to_save: RenderConfig, profile_name: str, base_dir: Optional[Path] = None) -> bool:
    search_dir = base_dir or Path.cwd()
    target_toml_path = search_dir / ".txtempl.toml"
    if not target_toml_path.exists():
        alt_path = search_dir / "txtempl.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    profile_data = {name: dict(getattr(config_to_save, name)) for name in SEED_TABLES if getattr(config_to_save, name)}
    if not profile_data:
        log.info("no_variables_to_save_for_profile", profile=profile_name)
        return False

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == DEFAULT_PROFILE_NAME:
        for name, table in profile_data.items():
            existing_data.setdefault(name, {}).update(table)
    else:
        existing_data.setdefault("profiles", {})[profile_name] = profile_data

    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return True
