"""Rule-set compiler.

Loads a dependency-cruiser rules file (JSON or YAML) and folds in every
rules file it ``extends``, so callers get one flat rule set back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .utils import get_logger, normalize_path_abs

logger = get_logger(__name__)

_JAVASCRIPT_SUFFIXES = {".js", ".cjs", ".mjs"}
_LOADABLE_SUFFIXES = (".json", ".yaml", ".yml")
_CONCATENATED_KEYS = ("forbidden", "allowed")


class RuleSetCompileError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = str(message)

    def __str__(self) -> str:
        return str(self.message)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _dedupe(items: list[Any]) -> list[Any]:
    # rules are dicts, so membership has to go by equality
    out: list[Any] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def _loadable_siblings(path: Path) -> list[str]:
    return [
        candidate.name
        for candidate in (path.with_suffix(suffix) for suffix in _LOADABLE_SUFFIXES)
        if candidate.is_file()
    ]


def _load_rules_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise RuleSetCompileError("not_found", f"Can't open '{path}' for reading.")
    if path.suffix.lower() in _JAVASCRIPT_SUFFIXES:
        message = f"'{path}' is a JavaScript rules file. Convert it to JSON or YAML."
        alternatives = _loadable_siblings(path)
        if alternatives:
            message += f" Loadable rules files next to it: {', '.join(alternatives)}"
        raise RuleSetCompileError("unsupported_format", message)
    try:
        text = path.read_text(encoding="utf-8").strip()
    except (UnicodeDecodeError, OSError) as exc:
        raise RuleSetCompileError(
            "parse_error", f"Failed to read rules file {path}: {exc}"
        ) from exc
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise RuleSetCompileError(
                "parse_error", f"Failed to parse rules file {path}: {exc}"
            ) from exc
        if data is None:
            return {}
    if not isinstance(data, dict):
        raise RuleSetCompileError("invalid_root", f"Rules file root must be an object: {path}")
    return data


def _extends_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise RuleSetCompileError(
        "invalid_extends", f"'extends' must be a string or a list of strings, got {value!r}"
    )


def merge_rule_sets(base: dict[str, Any], extension: dict[str, Any]) -> dict[str, Any]:
    """Merge ``extension`` on top of ``base``.

    ``forbidden`` and ``allowed`` are concatenated (base first, duplicates
    dropped), ``options`` is merged key by key and any other key is taken
    from ``extension`` when it has one.
    """
    merged: dict[str, Any] = dict(base)
    for key, value in extension.items():
        if key in _CONCATENATED_KEYS:
            merged[key] = _dedupe(list(base.get(key) or []) + list(value or []))
        elif key == "options" and isinstance(value, dict):
            merged[key] = _deep_merge(dict(base.get(key) or {}), value)
        else:
            merged[key] = value
    return merged


def _compile(path: Path, visited: tuple[Path, ...]) -> dict[str, Any]:
    if path in visited:
        chain = " -> ".join(str(item) for item in (*visited, path))
        raise RuleSetCompileError("circular_extends", f"config is circular - {chain}")
    logger.debug("loading rules file %s", path)
    rule_set = _load_rules_file(path)

    compiled: dict[str, Any] = {}
    for extended in _extends_list(rule_set.get("extends")):
        extended_path = normalize_path_abs(path.parent / extended)
        compiled = merge_rule_sets(compiled, _compile(extended_path, (*visited, path)))

    own = {key: value for key, value in rule_set.items() if key != "extends"}
    return merge_rule_sets(compiled, own)


def compile_config(file_name: str, *, base_dir: Path | str | None = None) -> dict[str, Any]:
    root = Path(base_dir) if base_dir is not None else Path.cwd()
    path = Path(file_name)
    if not path.is_absolute():
        path = root / path
    return _compile(normalize_path_abs(path), ())
