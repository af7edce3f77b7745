import pytest

from entryfs.config import DEFAULT_TIMESTAMP_FORMAT, Settings
from entryfs.domain.enums import NamingStrategy
from entryfs.domain.errors import ConfigurationError


def test_defaults():
    s = Settings.from_env({})
    assert s.naming_strategy is NamingStrategy.TIMESTAMP_TICKS
    assert s.max_attempts == 10
    assert s.timestamp_format == DEFAULT_TIMESTAMP_FORMAT
    assert s.unique_name_format == "{name}-{suffix}"
    assert s.encoding == "utf-8"
    assert s.async_workers == 4
    assert s.storage == "local"
    assert s.record_calls is False


def test_from_env_reads_every_variable():
    s = Settings.from_env(
        {
            "ENTRYFS_NAMING_STRATEGY": "INTEGER",
            "ENTRYFS_MAX_ATTEMPTS": "3",
            "ENTRYFS_TIMESTAMP_FORMAT": "%H%M",
            "ENTRYFS_UNIQUE_NAME_FORMAT": "{name}_{suffix}",
            "ENTRYFS_ENCODING": "latin-1",
            "ENTRYFS_ASYNC_WORKERS": "0",
            "ENTRYFS_STORAGE": " Memory ",
            "ENTRYFS_RECORD_CALLS": "yes",
        }
    )
    assert s.naming_strategy is NamingStrategy.INTEGER
    assert s.max_attempts == 3
    assert s.timestamp_format == "%H%M"
    assert s.unique_name_format == "{name}_{suffix}"
    assert s.encoding == "latin-1"
    assert s.async_workers == 0
    assert s.storage == "memory"
    assert s.record_calls is True


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("ENTRYFS_NAMING_STRATEGY", "timestamp_utc")
    monkeypatch.delenv("ENTRYFS_MAX_ATTEMPTS", raising=False)
    s = Settings.from_env()
    assert s.naming_strategy is NamingStrategy.TIMESTAMP_UTC
    assert s.max_attempts == 10


@pytest.mark.parametrize(
    "env",
    [
        {"ENTRYFS_NAMING_STRATEGY": "random"},
        {"ENTRYFS_MAX_ATTEMPTS": "ten"},
        {"ENTRYFS_MAX_ATTEMPTS": "0"},
        {"ENTRYFS_ASYNC_WORKERS": "-1"},
        {"ENTRYFS_UNIQUE_NAME_FORMAT": "{name}"},
        {"ENTRYFS_STORAGE": "s3"},
        {"ENTRYFS_RECORD_CALLS": "maybe"},
    ],
)
def test_bad_values_raise_configuration_error(env):
    with pytest.raises(ConfigurationError):
        Settings.from_env(env)


def test_with_overrides_ignores_none():
    base = Settings(max_attempts=4)
    s = base.with_overrides(naming_strategy=NamingStrategy.INTEGER, max_attempts=None)
    assert s.naming_strategy is NamingStrategy.INTEGER
    assert s.max_attempts == 4
