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

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .domain.enums import NamingStrategy
from .domain.errors import ConfigurationError

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d_%I-%M-%S-%f"
DEFAULT_UNIQUE_NAME_FORMAT = "{name}-{suffix}"
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_ASYNC_WORKERS = 4
STORAGE_PROVIDERS = ("local", "memory")


@dataclass(frozen=True)
class Settings:
    """
    Tunables shared by the resolver, the entry handles and the async bridge.

    Environment variables (all optional):
      ENTRYFS_NAMING_STRATEGY    integer | timestamp_ticks | timestamp | timestamp_utc
      ENTRYFS_MAX_ATTEMPTS       positive integer
      ENTRYFS_TIMESTAMP_FORMAT   strftime pattern for the timestamp strategies
      ENTRYFS_UNIQUE_NAME_FORMAT format string with {name} and {suffix}
      ENTRYFS_ENCODING           text encoding for whole-file reads/writes
      ENTRYFS_ASYNC_WORKERS      worker pool size; 0 runs bridged calls inline
      ENTRYFS_STORAGE            local | memory (memory starts empty in every process)
      ENTRYFS_RECORD_CALLS       1/true/yes/on logs every storage call at DEBUG
    """

    naming_strategy: NamingStrategy = NamingStrategy.TIMESTAMP_TICKS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    unique_name_format: str = DEFAULT_UNIQUE_NAME_FORMAT
    encoding: str = "utf-8"
    async_workers: int = DEFAULT_ASYNC_WORKERS
    storage: str = "local"
    record_calls: bool = False

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(
                f"max_attempts must be >= 1 (got {self.max_attempts})"
            )
        if self.async_workers < 0:
            raise ConfigurationError(
                f"async_workers must be >= 0 (got {self.async_workers})"
            )
        if self.storage not in STORAGE_PROVIDERS:
            raise ConfigurationError(
                f"Unknown storage: {self.storage}. Valid options: {', '.join(STORAGE_PROVIDERS)}"
            )
        if "{name}" not in self.unique_name_format or "{suffix}" not in self.unique_name_format:
            raise ConfigurationError(
                "unique_name_format must contain both {name} and {suffix}"
            )

    def with_overrides(self, **changes) -> Settings:
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ

        strategy_name = env.get("ENTRYFS_NAMING_STRATEGY", "timestamp_ticks").strip().lower()
        try:
            strategy = NamingStrategy(strategy_name)
        except ValueError:
            valid = ", ".join(s.value for s in NamingStrategy)
            raise ConfigurationError(
                f"Unknown naming strategy: {strategy_name}. Valid options: {valid}"
            ) from None

        return cls(
            naming_strategy=strategy,
            max_attempts=_int_from_env(env, "ENTRYFS_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            timestamp_format=env.get("ENTRYFS_TIMESTAMP_FORMAT", DEFAULT_TIMESTAMP_FORMAT),
            unique_name_format=env.get(
                "ENTRYFS_UNIQUE_NAME_FORMAT", DEFAULT_UNIQUE_NAME_FORMAT
            ),
            encoding=env.get("ENTRYFS_ENCODING", "utf-8"),
            async_workers=_int_from_env(env, "ENTRYFS_ASYNC_WORKERS", DEFAULT_ASYNC_WORKERS),
            storage=env.get("ENTRYFS_STORAGE", "local").strip().lower(),
            record_calls=_bool_from_env(env, "ENTRYFS_RECORD_CALLS"),
        )


def _int_from_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer (got {raw!r})") from None


def _bool_from_env(env: Mapping[str, str], key: str) -> bool:
    raw = (env.get(key) or "").strip().lower()
    if raw in ("", "0", "false", "no", "off"):
        return False
    if raw in ("1", "true", "yes", "on"):
        return True
    raise ConfigurationError(f"{key} must be a boolean (got {raw!r})")
