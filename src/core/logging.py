"""Process-wide logging setup."""
from __future__ import annotations

import logging
import sys

_configured = False


class _OneLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return super().format(record).replace("\n", " | ")


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a single stdout handler on the root logger (idempotent)."""

    global _configured
    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        _OneLineFormatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    _configured = True

    # Quiet noisy libraries a bit
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
