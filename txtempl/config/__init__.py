# txtempl/config/__init__.py
"""
Configuration for the txtempl CLI: the RenderConfig dataclass and the TOML
files that seed constants, options and keys.
"""
from .settings import RenderConfig
from .loader import build_seed_store, load_and_merge_configs, resolve_seed_tables

__all__ = ["RenderConfig", "build_seed_store", "load_and_merge_configs", "resolve_seed_tables"]
