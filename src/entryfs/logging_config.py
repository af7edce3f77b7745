# Licensed under the Apache License, Version 2.0
import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level_name: Optional[str] = None) -> None:
    """
    Configure root logging once per process.

    `level_name` wins over ENTRYFS_LOG_LEVEL; unknown names fall back to INFO.
    Calling again only adjusts the root level.
    """
    level_name = (level_name or os.getenv("ENTRYFS_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
