"""Shared helpers for the depcruise package.

Keeps logger setup and path handling in one place so the normalizer,
the rule-set compiler and the CLI format things the same way.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def normalize_path_abs(path: Path | str) -> Path:
    """Make a path absolute without resolving symlinks."""
    return Path(os.path.abspath(str(path)))


def is_readable_file(file_name: str | Path) -> bool:
    """Return True when ``file_name`` exists and the current user may read it."""
    return os.access(str(file_name), os.R_OK)


def as_file_reference(file_name: str) -> str:
    """Prefix a relative path with ``./`` so it reads as a file, not a package.

    Absolute paths and paths that already start with ``./`` or ``../`` come
    back untouched.
    """
    if os.path.isabs(file_name):
        return file_name
    if file_name.startswith(("./", "../", ".\\", "..\\")):
        return file_name
    return f"./{file_name}"


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

_DEPCRUISE_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under the ``depcruise`` hierarchy.

    Usage::

        from depcruise.utils import get_logger
        logger = get_logger(__name__)
        logger.debug("rules file resolved")
    """
    logger = logging.getLogger(
        name if name.startswith("depcruise") else f"depcruise.{name}"
    )
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEPCRUISE_LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(
            logging.DEBUG
            if os.environ.get("DEPCRUISE_DEBUG", "").lower() in {"1", "true", "yes"}
            else logging.WARNING
        )
    return logger
