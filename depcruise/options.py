"""Normalization of cruise options.

Turns whatever the argument parser produced into the options mapping the
cruise engine expects: unknown keys dropped, defaults filled in, the rules
file located and compiled, and the webpack/TypeScript/Babel config file
names moved to where the engine looks for them.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from . import defaults
from .compile_config import compile_config
from .defaults import KNOWN_CRUISE_OPTIONS
from .utils import as_file_reference, get_logger, is_readable_file

logger = get_logger(__name__)

_SINGLE_DIGIT_RE = re.compile(r"[0-9]")
_ONE_OR_MORE_NON_SLASHES = "[^/]+"
_FOLDER_PATTERN = f"{_ONE_OR_MORE_NON_SLASHES}/"
_FOLDER_BELOW_NODE_MODULES = f"node_modules/{_ONE_OR_MORE_NON_SLASHES}"

_INIT_HINT = "You can create a dependency-cruiser configuration file with depcruise init ."


class OptionsError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = str(message)

    def __str__(self) -> str:
        return str(self.message)


class RulesFileNotFoundError(OptionsError):
    def __init__(self, file_name: str) -> None:
        super().__init__(
            "rules_file_not_found",
            f"Can't open '{file_name}' for reading. Does it exist? ({_INIT_HINT})\n",
        )
        self.file_name = file_name


class NoDefaultRulesFileError(OptionsError):
    def __init__(self) -> None:
        super().__init__(
            "no_default_rules_file",
            f"Can't open '{defaults.DEFAULT_CONFIG_FILE_NAME}(on)' for reading. Does it exist?\n",
        )


@dataclass(frozen=True)
class ConfigWrapper:
    name: str
    default_file_name: str


CONFIG_WRAPPERS: tuple[ConfigWrapper, ...] = (
    ConfigWrapper("webpackConfig", defaults.WEBPACK_CONFIG),
    ConfigWrapper("tsConfig", defaults.TYPESCRIPT_CONFIG),
    ConfigWrapper("babelConfig", defaults.BABEL_CONFIG),
)


def get_option_value(default: str) -> Callable[[Any], str]:
    """Return a resolver that keeps string values and maps anything else to ``default``."""

    def _resolve(value: Any) -> str:
        if isinstance(value, str):
            return value
        return default

    return _resolve


determine_rules_file_name = get_option_value(defaults.OLD_DEFAULT_RULES_FILE_NAME)


def eject_non_cli_options(
    options: Mapping[str, Any], known_options: Iterable[str]
) -> dict[str, Any]:
    known = set(known_options)
    return {key: value for key, value in options.items() if key in known}


def normalize_module_systems(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value]
    return [part.strip() for part in str(value).split(",")]


def normalize_collapse(collapse: Any) -> Any:
    """Expand a single digit into a 'collapse to folder depth N' pattern.

    ``"2"`` becomes ``^([^/]+/){2}|node_modules/[^/]+``: the first two
    folders from the root, or a package directly under node_modules.
    Anything else is assumed to be a pattern already.
    """
    if isinstance(collapse, str) and _SINGLE_DIGIT_RE.fullmatch(collapse):
        return f"^({_FOLDER_PATTERN}){{{int(collapse)}}}|{_FOLDER_BELOW_NODE_MODULES}"
    return collapse


def _validate_and_get_custom_rules_file_name(validate: str) -> str:
    if not is_readable_file(validate):
        raise RulesFileNotFoundError(validate)
    return validate


def _validate_and_get_default_rules_file_name() -> str:
    for candidate in defaults.RULES_FILE_NAME_SEARCH_ARRAY:
        if is_readable_file(candidate):
            return candidate
    raise NoDefaultRulesFileError()


def validate_and_normalize_rules_file_name(validate: Any) -> str:
    if isinstance(validate, str):
        return _validate_and_get_custom_rules_file_name(validate)
    return _validate_and_get_default_rules_file_name()


def _validation_requested(options: Mapping[str, Any]) -> bool:
    # an explicit False/None (e.g. from a previous normalization) means "off"
    return "validate" in options and options["validate"] not in (False, None)


def _wrapper_options(options: dict[str, Any], create: bool) -> dict[str, Any] | None:
    rule_set = options.get("ruleSet")
    if not isinstance(rule_set, dict):
        if not create:
            return None
        rule_set = options["ruleSet"] = {}
    rule_set_options = rule_set.get("options")
    if not isinstance(rule_set_options, dict):
        if not create:
            return None
        rule_set_options = rule_set["options"] = {}
    return rule_set_options


def normalize_config_file(options: dict[str, Any], wrapper: ConfigWrapper) -> dict[str, Any]:
    """Make sure an active ``wrapper`` ends up with a concrete ``fileName``.

    A top-level ``options[wrapper.name]`` wins and is moved to
    ``ruleSet.options.<name>.fileName``. Otherwise a wrapper already in the
    rule set keeps its own fileName, or gets the wrapper's default.
    """
    if wrapper.name in options:
        file_name = get_option_value(wrapper.default_file_name)(options.pop(wrapper.name))
        rule_set_options = _wrapper_options(options, create=True)
        existing = rule_set_options.get(wrapper.name)
        wrapper_config = dict(existing) if isinstance(existing, dict) else {}
        wrapper_config["fileName"] = file_name
        rule_set_options[wrapper.name] = wrapper_config
        return options

    rule_set_options = _wrapper_options(options, create=False)
    if rule_set_options is None:
        return options
    existing = rule_set_options.get(wrapper.name)
    if not existing and not isinstance(existing, dict):
        return options
    wrapper_config = dict(existing) if isinstance(existing, dict) else {}
    if not wrapper_config.get("fileName"):
        logger.debug("%s: no fileName given, using %s", wrapper.name, wrapper.default_file_name)
        wrapper_config["fileName"] = wrapper.default_file_name
    rule_set_options[wrapper.name] = wrapper_config
    return options


def normalize_options(
    options: Mapping[str, Any],
    known_options: Iterable[str] = KNOWN_CRUISE_OPTIONS,
    *,
    compiler: Callable[[str], dict[str, Any]] = compile_config,
) -> dict[str, Any]:
    """Return a fresh, engine-ready copy of ``options``.

    Args:
        options: Raw options, e.g. ``vars()`` of an argparse namespace.
        known_options: Option names to keep; everything else is dropped.
        compiler: Turns a rules file name into a rule set.

    Returns:
        The normalized options. ``outputTo``, ``outputType`` and
        ``validate`` (a bool) are always present.

    Raises:
        RulesFileNotFoundError: The rules file named by ``validate`` or
            ``config`` can't be read.
        NoDefaultRulesFileError: Validation was asked for without a file
            name and none of the default rules files exist.
    """
    normalized: dict[str, Any] = {
        "outputTo": defaults.OUTPUT_TO,
        "outputType": defaults.OUTPUT_TYPE,
        **copy.deepcopy(eject_non_cli_options(options, known_options)),
    }

    if "moduleSystems" in normalized:
        normalized["moduleSystems"] = normalize_module_systems(normalized["moduleSystems"])

    if "config" in normalized:
        normalized["validate"] = normalized["config"]

    if "collapse" in normalized:
        normalized["collapse"] = normalize_collapse(normalized["collapse"])

    validate = _validation_requested(normalized)
    if validate:
        rules_file = validate_and_normalize_rules_file_name(normalized["validate"])
        logger.debug("using rules file %s", rules_file)
        normalized["rulesFile"] = rules_file
        normalized["ruleSet"] = copy.deepcopy(compiler(as_file_reference(rules_file)))

    for wrapper in CONFIG_WRAPPERS:
        normalized = normalize_config_file(normalized, wrapper)

    normalized["validate"] = validate
    return normalized
