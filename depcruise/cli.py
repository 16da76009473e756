from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .compile_config import RuleSetCompileError
from .config import init_rules_file
from .options import OptionsError, normalize_options
from .utils import get_logger, normalize_path_abs

logger = get_logger(__name__)


def _print_output(payload: dict[str, Any], output: str) -> None:
    if output == "json":
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for key, value in payload.items():
            print(f"{key}: {value}")


def cmd_init(args: argparse.Namespace) -> int:
    project_dir = normalize_path_abs(Path(args.project_dir or args.project))
    result = init_rules_file(project_dir, force=args.force)
    _print_output({"status": "ok", "project": str(project_dir), **result}, args.output)
    return 0


def cmd_options(args: argparse.Namespace) -> int:
    # func, command, files and output are not cruise options; the
    # normalizer drops them
    options = normalize_options(vars(args))
    _print_output(
        {"status": "ok", "files": list(args.files), "options": options},
        args.output,
    )
    return 0


def _add_options_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="*", default=[], help="Files or folders to cruise")
    parser.add_argument(
        "--validate",
        dest="validate",
        nargs="?",
        const=True,
        metavar="FILE",
        help="Validate against the rules in FILE (default: .dependency-cruiser.json)",
    )
    parser.add_argument(
        "--config",
        dest="config",
        nargs="?",
        const=True,
        metavar="FILE",
        help="Alias for --validate",
    )
    parser.add_argument("-T", "--output-type", dest="outputType", help="Output type")
    parser.add_argument("-f", "--output-to", dest="outputTo", help="File to write output to; - for stdout")
    parser.add_argument(
        "-M",
        "--module-systems",
        dest="moduleSystems",
        help="Comma separated list of module systems to cruise, e.g. cjs,amd,es6",
    )
    parser.add_argument(
        "--collapse",
        dest="collapse",
        help="Collapse to a folder depth (a single digit) or to a pattern",
    )
    parser.add_argument("-x", "--exclude", dest="exclude", help="Regex of modules to exclude")
    parser.add_argument("-I", "--include-only", dest="includeOnly", help="Regex of modules to include")
    parser.add_argument("-F", "--focus", dest="focus", help="Regex of modules to focus on")
    parser.add_argument("-X", "--do-not-follow", dest="doNotFollow", help="Regex of modules not to follow")
    parser.add_argument("-d", "--max-depth", dest="maxDepth", type=int, help="Maximum cruise depth")
    parser.add_argument("-p", "--prefix", dest="prefix", help="Prefix for links in the output")
    parser.add_argument(
        "--preserve-symlinks",
        dest="preserveSymlinks",
        action="store_true",
        help="Leave symlinks unchanged",
    )
    parser.add_argument(
        "--ts-pre-compilation-deps",
        dest="tsPreCompilationDeps",
        action="store_true",
        help="Detect dependencies that only exist before TypeScript compilation",
    )
    parser.add_argument(
        "--ts-config",
        dest="tsConfig",
        nargs="?",
        const=True,
        metavar="FILE",
        help="Use a TypeScript project config (default: tsconfig.json)",
    )
    parser.add_argument(
        "--webpack-config",
        dest="webpackConfig",
        nargs="?",
        const=True,
        metavar="FILE",
        help="Use a webpack config (default: webpack.config.js)",
    )
    parser.add_argument(
        "--babel-config",
        dest="babelConfig",
        nargs="?",
        const=True,
        metavar="FILE",
        help="Use a babel config (default: .babelrc)",
    )
    parser.add_argument("--base-dir", dest="baseDir", help="Directory to cruise from")
    parser.add_argument("--output", choices=["text", "json"], default="text")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depcruise",
        description="depcruise CLI: normalize and inspect dependency-cruiser options",
    )
    parser.add_argument("--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="command", required=True)

    init_parser = sub.add_parser("init", help="Write a starter .dependency-cruiser.json")
    init_parser.add_argument(
        "project_dir", nargs="?", default=None, help="Project directory (same as --project)"
    )
    init_parser.add_argument("--project", default=".", help="Project directory")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing rules file")
    init_parser.add_argument("--output", choices=["text", "json"], default="text")
    init_parser.set_defaults(func=cmd_init)

    # options the user leaves out must stay absent, not None
    options_parser = sub.add_parser(
        "options",
        help="Print the normalized cruise options",
        argument_default=argparse.SUPPRESS,
    )
    _add_options_arguments(options_parser)
    options_parser.set_defaults(func=cmd_options)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        exit_code = int(args.func(args))
    except (OptionsError, RuleSetCompileError) as exc:
        logger.debug("%s failed: %s", args.command, exc.code)
        print(f"ERROR: {str(exc).rstrip()}", file=sys.stderr)
        exit_code = 1
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
