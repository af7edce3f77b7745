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

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Generator, Generic, Optional, TypeVar

from ..config import DEFAULT_ASYNC_WORKERS
from ..domain.errors import OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_pool_lock = threading.Lock()
_pool: Optional[ThreadPoolExecutor] = None
_pool_size: int = DEFAULT_ASYNC_WORKERS


class CancellationToken:
    """Cooperative cancellation signal; only consulted before a call is scheduled."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled before it was scheduled")


def configure_worker_pool(workers: int) -> None:
    """
    Resize the shared worker pool. 0 disables it: bridged calls then run inline.

    An existing pool is shut down (without waiting) and recreated lazily.
    """
    global _pool, _pool_size
    if workers < 0:
        raise ValueError("workers must be >= 0")
    with _pool_lock:
        old, _pool, _pool_size = _pool, None, workers
    if old is not None:
        old.shutdown(wait=False)
    logger.debug("async worker pool configured with %d worker(s)", workers)


def get_worker_pool() -> Optional[ThreadPoolExecutor]:
    global _pool
    with _pool_lock:
        if _pool_size == 0:
            return None
        if _pool is None:
            _pool = ThreadPoolExecutor(max_workers=_pool_size, thread_name_prefix="entryfs")
        return _pool


class BridgedCall(Generic[T]):
    """
    Awaitable wrapping one blocking storage call.

    The cancellation token is checked once, here, at construction. Once
    scheduled the call runs to completion; blocking storage calls are not
    interruptible.
    """

    def __init__(
        self,
        fn: Callable[..., T],
        *args: Any,
        cancel_token: Optional[CancellationToken] = None,
        **kwargs: Any,
    ) -> None:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        self._call = functools.partial(fn, *args, **kwargs)

    @property
    def is_completed(self) -> bool:
        """True when no worker pool is configured and awaiting runs the call inline."""
        return _pool_size == 0

    def __await__(self) -> Generator[Any, None, T]:
        # Resolved per await; configure_worker_pool may replace the pool at any time.
        pool = get_worker_pool()
        if pool is None:
            return self._call()
        loop = asyncio.get_running_loop()
        return (yield from loop.run_in_executor(pool, self._call).__await__())


def bridge(
    fn: Callable[..., T],
    *args: Any,
    cancel_token: Optional[CancellationToken] = None,
    **kwargs: Any,
) -> BridgedCall[T]:
    return BridgedCall(fn, *args, cancel_token=cancel_token, **kwargs)
