from __future__ import annotations

import logging
from typing import Optional

_INITIALIZED = False


def configure_logging(*, level: Optional[str] = None) -> None:
    """Configure application-wide console logging once per process."""

    global _INITIALIZED
    if _INITIALIZED:
        return

    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler()],
    )

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(resolved_level))


__all__ = ["configure_logging"]
