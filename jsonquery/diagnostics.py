"""
Diagnostics

Structured records for input entries the compiler dropped or degraded.
The compiler never raises for shape problems, so these are the only trace.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

INVALID_ORDER_TOKEN = "INVALID_ORDER_TOKEN"
UNRESOLVED_RELATION = "UNRESOLVED_RELATION"
INVALID_EXPAND = "INVALID_EXPAND"
UNRESOLVED_EXPAND = "UNRESOLVED_EXPAND"


def _diagnostic(code: str, path: str, message: str, **extra) -> dict:
    """Build a structured diagnostic."""
    diag = {"code": code, "path": path, "message": message}
    diag.update(extra)
    return diag


def record(diagnostics: Optional[list], code: str, path: str, message: str, **extra) -> None:
    """
    Log a dropped/degraded entry and append it to `diagnostics` when collecting.
    Passing None disables collection; the debug log line is always written.
    """
    logger.debug("%s at %s: %s", code, path, message)
    if diagnostics is not None:
        diagnostics.append(_diagnostic(code, path, message, **extra))
