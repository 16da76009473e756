from __future__ import annotations

import json
from pathlib import Path

import pytest

from depcruise.compile_config import RuleSetCompileError, compile_config, merge_rule_sets


def _write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


NO_CIRCULAR = {"name": "no-circular", "from": {}, "to": {"circular": True}}
NO_ORPHANS = {"name": "no-orphans", "from": {"orphan": True}, "to": {}}


def test_loads_json_rules_file(tmp_path: Path) -> None:
    _write_json(tmp_path / "rules.json", {"forbidden": [NO_CIRCULAR]})
    rule_set = compile_config("rules.json", base_dir=tmp_path)
    assert rule_set == {"forbidden": [NO_CIRCULAR]}


def test_resolves_against_cwd_by_default(tmp_path: Path, monkeypatch) -> None:
    _write_json(tmp_path / ".dependency-cruiser.json", {"allowedSeverity": "warn"})
    monkeypatch.chdir(tmp_path)
    assert compile_config("./.dependency-cruiser.json") == {"allowedSeverity": "warn"}


def test_loads_yaml_rules_file(tmp_path: Path) -> None:
    (tmp_path / "rules.yaml").write_text(
        "forbidden:\n  - name: no-circular\n    from: {}\n    to:\n      circular: true\n",
        encoding="utf-8",
    )
    rule_set = compile_config(str(tmp_path / "rules.yaml"))
    assert rule_set["forbidden"] == [NO_CIRCULAR]


def test_empty_file_compiles_to_empty_rule_set(tmp_path: Path) -> None:
    (tmp_path / "empty.json").write_text("  \n", encoding="utf-8")
    assert compile_config("empty.json", base_dir=tmp_path) == {}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("absent.json", base_dir=tmp_path)
    assert excinfo.value.code == "not_found"


def test_javascript_rules_file_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".dependency-cruiser.js").write_text("module.exports = {};\n", encoding="utf-8")
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("./.dependency-cruiser.js", base_dir=tmp_path)
    assert excinfo.value.code == "unsupported_format"


def test_non_object_root_is_rejected(tmp_path: Path) -> None:
    _write_json(tmp_path / "list.json", [1, 2, 3])
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("list.json", base_dir=tmp_path)
    assert excinfo.value.code == "invalid_root"


def test_unparseable_file_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "broken.yaml").write_text("forbidden: [unclosed\n", encoding="utf-8")
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("broken.yaml", base_dir=tmp_path)
    assert excinfo.value.code == "parse_error"


def test_extends_merges_base_first(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "configs" / "base.json",
        {
            "forbidden": [NO_CIRCULAR],
            "allowedSeverity": "error",
            "options": {"tsConfig": {"fileName": "tsconfig.base.json"}, "doNotFollow": "node_modules"},
        },
    )
    _write_json(
        tmp_path / "rules.json",
        {
            "extends": "./configs/base.json",
            "forbidden": [NO_ORPHANS, NO_CIRCULAR],
            "allowedSeverity": "warn",
            "options": {"tsConfig": {"fileName": "tsconfig.json"}},
        },
    )
    rule_set = compile_config("rules.json", base_dir=tmp_path)
    assert "extends" not in rule_set
    assert rule_set["forbidden"] == [NO_CIRCULAR, NO_ORPHANS]
    assert rule_set["allowedSeverity"] == "warn"
    assert rule_set["options"] == {
        "tsConfig": {"fileName": "tsconfig.json"},
        "doNotFollow": "node_modules",
    }


def test_extends_list_and_nested_relative_paths(tmp_path: Path) -> None:
    _write_json(tmp_path / "shared" / "a.json", {"extends": "./b.json", "forbidden": [NO_CIRCULAR]})
    _write_json(tmp_path / "shared" / "b.json", {"allowed": [{"from": {}, "to": {}}]})
    _write_json(tmp_path / "shared" / "c.json", {"forbidden": [NO_ORPHANS]})
    _write_json(tmp_path / "rules.json", {"extends": ["./shared/a.json", "./shared/c.json"]})
    rule_set = compile_config("rules.json", base_dir=tmp_path)
    assert rule_set["forbidden"] == [NO_CIRCULAR, NO_ORPHANS]
    assert rule_set["allowed"] == [{"from": {}, "to": {}}]


def test_circular_extends_is_detected(tmp_path: Path) -> None:
    _write_json(tmp_path / "a.json", {"extends": "./b.json"})
    _write_json(tmp_path / "b.json", {"extends": "./a.json"})
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("a.json", base_dir=tmp_path)
    assert excinfo.value.code == "circular_extends"
    assert "circular" in str(excinfo.value)


def test_invalid_extends_value(tmp_path: Path) -> None:
    _write_json(tmp_path / "rules.json", {"extends": 42})
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("rules.json", base_dir=tmp_path)
    assert excinfo.value.code == "invalid_extends"


def test_merge_rule_sets_does_not_touch_inputs() -> None:
    base = {"forbidden": [NO_CIRCULAR], "options": {"a": {"x": 1}}}
    extension = {"forbidden": [NO_ORPHANS], "options": {"a": {"y": 2}}}
    merged = merge_rule_sets(base, extension)
    assert merged == {"forbidden": [NO_CIRCULAR, NO_ORPHANS], "options": {"a": {"x": 1, "y": 2}}}
    assert base == {"forbidden": [NO_CIRCULAR], "options": {"a": {"x": 1}}}
    assert extension == {"forbidden": [NO_ORPHANS], "options": {"a": {"y": 2}}}


def test_non_utf8_rules_file_is_a_parse_error(tmp_path: Path) -> None:
    (tmp_path / "rules.json").write_bytes('{"comment": "café"}'.encode("latin-1"))
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config("rules.json", base_dir=tmp_path)
    assert excinfo.value.code == "parse_error"
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_javascript_rules_file_error_names_loadable_alternatives(tmp_path: Path) -> None:
    (tmp_path / ".dependency-cruiser.js").write_text("module.exports = {};\n", encoding="utf-8")
    (tmp_path / ".dependency-cruiser.yaml").write_text("forbidden: []\n", encoding="utf-8")
    with pytest.raises(RuleSetCompileError) as excinfo:
        compile_config(".dependency-cruiser.js", base_dir=tmp_path)
    assert excinfo.value.code == "unsupported_format"
    assert ".dependency-cruiser.yaml" in str(excinfo.value)
