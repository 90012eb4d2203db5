"""Logging setup for the editor and its engine modules."""

from __future__ import annotations

import logging
import os
from typing import Dict, Mapping, Optional, Union

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_ROOT_LOGGER = "dictone"
_CONFIGURED = False

LevelLike = Union[str, int, None]


def _resolve_level(level: LevelLike, default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    text = str(level).strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    return resolved if isinstance(resolved, int) else default


def parse_module_levels(raw: Optional[str]) -> Dict[str, int]:
    """Parse ``"core=DEBUG,app.data=WARNING"`` into logger levels.

    Names are relative to the ``dictone`` logger unless they already start
    with it. Entries without ``=`` or with an unknown level are ignored.
    """

    levels: Dict[str, int] = {}
    for entry in (raw or "").split(","):
        name, separator, level = entry.partition("=")
        name = name.strip()
        if not separator or not name:
            continue
        resolved = _resolve_level(level, default=-1)
        if resolved < 0:
            continue
        if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
            name = f"{_ROOT_LOGGER}.{name}"
        levels[name] = resolved
    return levels


def configure_logging(
    level: LevelLike = None,
    *,
    module_levels: Optional[Mapping[str, LevelLike]] = None,
    force: bool = False,
) -> None:
    """Initialise root logging handlers for the application.

    ``level`` falls back to ``DICTONE_LOG_LEVEL`` and then ``INFO``. Individual
    modules can be tuned with ``module_levels`` or ``DICTONE_LOG_LEVELS``,
    e.g. ``DICTONE_LOG_LEVELS=core=DEBUG`` surfaces the engine's per-keystroke
    detail while the storage and UI layers stay at the base level.
    """

    global _CONFIGURED

    if _CONFIGURED and not force:
        return

    resolved_level = _resolve_level(level if level is not None else os.environ.get("DICTONE_LOG_LEVEL"))
    overrides = parse_module_levels(os.environ.get("DICTONE_LOG_LEVELS"))
    for name, module_level in (module_levels or {}).items():
        overrides.update(parse_module_levels(f"{name}={module_level}"))

    logging.basicConfig(level=resolved_level, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger(_ROOT_LOGGER).setLevel(resolved_level)
    for name, module_level in overrides.items():
        logging.getLogger(name).setLevel(module_level)
    _CONFIGURED = True


__all__ = ["configure_logging", "parse_module_levels"]
