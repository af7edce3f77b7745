import threading

import pytest

from entryfs.adapters.storage.memory_storage import MemoryStorage
from entryfs.config import Settings
from entryfs.domain.enums import CollisionPolicy, NamingStrategy
from entryfs.domain.errors import OperationCancelledError
from entryfs.services import BridgedCall, CancellationToken, FileEntry, FileSystem, bridge, configure_worker_pool


@pytest.fixture
def pool():
    configure_worker_pool(2)
    yield
    configure_worker_pool(4)


@pytest.fixture
def inline():
    configure_worker_pool(0)
    yield
    configure_worker_pool(4)


def test_cancelled_token_raises_before_scheduling():
    token = CancellationToken()
    token.cancel()
    calls = []
    with pytest.raises(OperationCancelledError):
        bridge(calls.append, 1, cancel_token=token)
    assert calls == []


def test_configure_rejects_negative_workers():
    with pytest.raises(ValueError):
        configure_worker_pool(-1)


@pytest.mark.asyncio
async def test_inline_when_pool_disabled(inline):
    call = BridgedCall(threading.get_ident)
    assert call.is_completed
    assert await call == threading.get_ident()


@pytest.mark.asyncio
async def test_pool_runs_off_the_event_loop_thread(pool):
    call = bridge(threading.get_ident)
    assert not call.is_completed
    assert await call != threading.get_ident()


@pytest.mark.asyncio
async def test_exceptions_propagate_through_the_bridge(pool):
    def boom():
        raise FileNotFoundError("nope")

    with pytest.raises(FileNotFoundError):
        await bridge(boom)


@pytest.mark.asyncio
async def test_entry_async_variants(pool):
    storage = MemoryStorage(directories=["/data"])
    fs = FileSystem(storage, Settings(naming_strategy=NamingStrategy.INTEGER))

    created = await fs.create_file_async("/data/a.txt")
    assert created.ok
    f: FileEntry = created.value
    assert (await f.write_all_async("payload")).ok
    assert await f.read_all_async() == "payload"
    copied = await fs.copy_file_async("/data/a.txt", "/data/a.txt", CollisionPolicy.GENERATE_UNIQUE_NAME)
    assert copied.failure is not None
    second = await fs.create_file_async("/data/a.txt", CollisionPolicy.GENERATE_UNIQUE_NAME)
    assert second.value.full_path == "/data/a-0.txt"
    assert (await f.rename_async("b")).value.full_path == "/data/b.txt"
    assert await fs.read_all_text_async("/data/b.txt") == "payload"
    assert (await f.delete_async()).ok


@pytest.mark.asyncio
async def test_cancelled_async_operation_does_nothing(inline):
    storage = MemoryStorage(directories=["/data"])
    fs = FileSystem(storage)
    token = CancellationToken()
    token.cancel()
    with pytest.raises(OperationCancelledError):
        await fs.create_file_async("/data/a.txt", cancel_token=token)
    assert storage.list_files("/data") == []


@pytest.mark.asyncio
async def test_call_built_before_a_pool_resize_still_runs(pool):
    call = bridge(threading.get_ident)
    configure_worker_pool(1)
    assert await call != threading.get_ident()

    call = bridge(threading.get_ident)
    configure_worker_pool(0)
    assert call.is_completed
    assert await call == threading.get_ident()
