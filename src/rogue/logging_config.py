import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v count to a level: none WARNING, -v INFO, -vv DEBUG."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: Optional[int] = None, default_level: int = logging.INFO) -> int:
    """Set up the root logger for command line runs and return the chosen level.

    ROGUE_LOG_LEVEL wins over both verbosity and default_level, so a run can
    be made chatty without touching its arguments.
    """
    level = default_level if verbosity is None else level_for_verbosity(verbosity)
    level_name = os.getenv("ROGUE_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("rogue").setLevel(level)
    return level
