from __future__ import annotations

OUTPUT_TO = "-"
OUTPUT_TYPE = "err"

DEFAULT_CONFIG_FILE_NAME = ".dependency-cruiser"
OLD_DEFAULT_RULES_FILE_NAME = ".dependency-cruiser.json"

# Probed in this order; the first readable one is used.
RULES_FILE_NAME_SEARCH_ARRAY: tuple[str, ...] = (
    ".dependency-cruiser.json",
    ".dependency-cruiser.js",
    ".dependency-cruiser.yaml",
    ".dependency-cruiser.yml",
)

WEBPACK_CONFIG = "webpack.config.js"
TYPESCRIPT_CONFIG = "tsconfig.json"
BABEL_CONFIG = ".babelrc"

KNOWN_CRUISE_OPTIONS: tuple[str, ...] = (
    "baseDir",
    "collapse",
    "config",
    "doNotFollow",
    "exclude",
    "focus",
    "help",
    "includeOnly",
    "info",
    "init",
    "maxDepth",
    "moduleSystems",
    "outputTo",
    "outputType",
    "prefix",
    "preserveSymlinks",
    "tsPreCompilationDeps",
    "tsConfig",
    "babelConfig",
    "validate",
    "version",
    "webpackConfig",
)
