from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .defaults import OLD_DEFAULT_RULES_FILE_NAME
from .utils import normalize_path_abs

DEFAULT_RULE_SET: dict[str, Any] = {
    "forbidden": [
        {
            "name": "no-circular",
            "severity": "warn",
            "comment": "This dependency is part of a circular relationship.",
            "from": {},
            "to": {"circular": True},
        },
        {
            "name": "no-orphans",
            "severity": "info",
            "comment": "This module is not used by any other module.",
            "from": {
                "orphan": True,
                "pathNot": [
                    "(^|/)\\.[^/]+\\.(js|cjs|mjs|ts|json)$",
                    "\\.d\\.ts$",
                    "(^|/)tsconfig\\.json$",
                ],
            },
            "to": {},
        },
        {
            "name": "not-to-unresolvable",
            "severity": "error",
            "comment": "This module depends on a module that cannot be found.",
            "from": {},
            "to": {"couldNotResolve": True},
        },
        {
            "name": "no-duplicate-dep-types",
            "severity": "warn",
            "comment": "This module depends on a package that is declared twice in package.json.",
            "from": {},
            "to": {"moreThanOneDependencyType": True},
        },
    ],
    "options": {
        "doNotFollow": {"path": "node_modules"},
        "moduleSystems": ["amd", "cjs", "es6", "tsd"],
    },
}


def _dump_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )


def init_rules_file(project_dir: Path, force: bool = False) -> dict[str, Any]:
    project_dir = normalize_path_abs(project_dir)
    project_dir.mkdir(parents=True, exist_ok=True)
    rules_path = project_dir / OLD_DEFAULT_RULES_FILE_NAME

    created: list[str] = []
    skipped: list[str] = []

    if force or not rules_path.exists():
        _dump_json(rules_path, DEFAULT_RULE_SET)
        created.append(str(rules_path))
    else:
        skipped.append(str(rules_path))

    return {"created": created, "skipped": skipped}
