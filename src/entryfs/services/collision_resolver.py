# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from typing import Callable, Optional

from ..config import DEFAULT_TIMESTAMP_FORMAT, DEFAULT_UNIQUE_NAME_FORMAT, Settings
from ..domain.enums import EntryKind, ExistenceResult, NamingStrategy
from ..domain.paths import combine, split_path
from ..domain.results import FailureKind, Result
from .naming import next_candidate_suffix

logger = logging.getLogger(__name__)

ExistsFn = Callable[[str], ExistenceResult]


def resolve(
    path: str,
    kind: EntryKind,
    strategy: NamingStrategy,
    max_attempts: int,
    exists: ExistsFn,
    *,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    name_format: str = DEFAULT_UNIQUE_NAME_FORMAT,
) -> Result[str]:
    """
    Turn `path` into a path that `exists` reports as free.

    Returns `path` itself when nothing lives there, otherwise the first free
    "{name}-{suffix}{extension}" candidate. After `max_attempts` occupied
    candidates the result is a COLLISION failure carrying `max_attempts`.

    Note:
      * The existence check and the caller's subsequent create are not atomic.
    """
    if exists(path) is ExistenceResult.NONE:
        return Result.success(path)

    directory, name, extension = split_path(path, kind)

    for attempt in range(max(0, max_attempts)):
        suffix = next_candidate_suffix(attempt, strategy, timestamp_format)
        candidate = combine(directory, name_format.format(name=name, suffix=suffix), extension)
        if exists(candidate) is ExistenceResult.NONE:
            logger.debug("resolve: %s -> %s (attempt %d)", path, candidate, attempt)
            return Result.success(candidate)

    logger.warning(
        "resolve: no free name for %s after %d attempt(s) (%s)",
        path,
        max_attempts,
        strategy.value,
    )
    return Result.fail(
        FailureKind.COLLISION,
        f"Could not generate a unique name for [{path}] in {max_attempts} attempt(s)",
        path=path,
        attempts=max_attempts,
    )


def resolve_unique(
    path: str, kind: EntryKind, exists: ExistsFn, settings: Optional[Settings] = None
) -> Result[str]:
    """`resolve` with strategy, attempts and formats taken from `settings`."""
    settings = settings or Settings()
    return resolve(
        path,
        kind,
        settings.naming_strategy,
        settings.max_attempts,
        exists,
        timestamp_format=settings.timestamp_format,
        name_format=settings.unique_name_format,
    )
