"""Option normalization for dependency-cruiser style dependency analysis."""

from __future__ import annotations

__version__ = "0.1.0"

from .compile_config import RuleSetCompileError, compile_config
from .options import (
    CONFIG_WRAPPERS,
    NoDefaultRulesFileError,
    OptionsError,
    RulesFileNotFoundError,
    determine_rules_file_name,
    normalize_options,
)

__all__ = [
    "CONFIG_WRAPPERS",
    "NoDefaultRulesFileError",
    "OptionsError",
    "RuleSetCompileError",
    "RulesFileNotFoundError",
    "compile_config",
    "determine_rules_file_name",
    "normalize_options",
]
