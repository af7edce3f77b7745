# Licensed under the Apache License, Version 2.0
import time
from datetime import datetime, timezone

from ..config import DEFAULT_TIMESTAMP_FORMAT
from ..domain.enums import NamingStrategy


def next_candidate_suffix(
    attempt: int,
    strategy: NamingStrategy,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> str:
    """
    Suffix for the `attempt`-th (0-based) unique-name candidate.

    Timestamp strategies may repeat across rapid calls; the resolver re-checks
    existence for every candidate.
    """
    if strategy is NamingStrategy.INTEGER:
        return str(attempt)
    if strategy is NamingStrategy.TIMESTAMP:
        return datetime.now().strftime(timestamp_format)
    if strategy is NamingStrategy.TIMESTAMP_UTC:
        return datetime.now(timezone.utc).strftime(timestamp_format)
    return str(time.monotonic_ns())
