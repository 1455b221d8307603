"""Shared logging helpers for contactlink."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

DEFAULT_LOG_LEVEL: Final[str] = "INFO"


def get_log_level() -> int:
    """Return the log level named by ``CONTACTLINK_LOG_LEVEL``."""

    name = (os.getenv("CONTACTLINK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise ConfigurationError(f"Unknown log level: {name}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to ``CONTACTLINK_LOG_LEVEL`` (INFO when unset) and the format is terse
    enough for CLI output. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
