"""
Logging setup for the job board.

Root handler configuration plus an adapter that tags lines with the acting
user and component, e.g. ``[user:1a2b3c4d] [saved_jobs] Saved job job-1``.
"""

import logging
import sys
from typing import Optional


class ContextAdapter(logging.LoggerAdapter):
    """Prefixes every message with the ``user_id`` / ``component`` in ``extra``."""

    def process(self, msg, kwargs):
        tags = []
        if self.extra.get("user_id"):
            tags.append(f"[user:{self.extra['user_id'][:8]}]")
        if self.extra.get("component"):
            tags.append(f"[{self.extra['component']}]")
        if tags:
            msg = f"{' '.join(tags)} {msg}"
        return msg, kwargs


def get_logger(name: str, user_id: Optional[str] = None, component: Optional[str] = None) -> ContextAdapter:
    return ContextAdapter(logging.getLogger(name), {"user_id": user_id, "component": component})


def setup_logging(level: str = "INFO", format: str = "simple", debug: bool = False) -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Log level name; unknown names fall back to INFO
        format: "simple" for console lines, "json" for one JSON object per line
        debug: Force DEBUG regardless of ``level`` (DEBUG_MODE)
    """
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(logging.Formatter(
            '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
