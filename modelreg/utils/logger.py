# file: modelreg/utils/logger.py
from __future__ import annotations
import sys
from typing import Any, Optional

from loguru import logger

PACKAGE = "modelreg"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

_HANDLER_ID: Optional[int] = None


def configure_logging(level: str = "INFO", sink: Any = None, enable: bool = True) -> Optional[int]:
    """
    Turn registry logging on (or off) and install a single sink for it.

    The package disables its own loguru records on import; calling this is
    the opt-in. Calling it again replaces the previously installed sink.
    Returns the loguru handler id, or None when logging was disabled.
    """
    global _HANDLER_ID

    if _HANDLER_ID is not None:
        logger.remove(_HANDLER_ID)
        _HANDLER_ID = None

    if not enable:
        logger.disable(PACKAGE)
        return None

    logger.enable(PACKAGE)
    _HANDLER_ID = logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        filter=PACKAGE,
        backtrace=True,
        diagnose=False,
    )
    return _HANDLER_ID
