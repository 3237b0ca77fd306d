# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
import threading

import pytest

from riakjson import Collection, Connection, ValidationError
from tests.helpers import RecordingTransport


class CountingLock:
    """Context manager that counts how often the registry takes it."""

    def __init__(self) -> None:
        self.acquired = 0
        self._lock = threading.Lock()

    def __enter__(self) -> None:
        self._lock.acquire()
        self.acquired += 1

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


def test_same_name_returns_same_handle(connection: Connection) -> None:
    first = connection.registry.get_or_create("cities")
    second = connection.registry.get_or_create("cities")

    assert first is second
    assert connection.collection("cities") is first
    assert isinstance(first, Collection)
    assert first.name == "cities"
    assert first.connection is connection


def test_different_names_get_different_handles(connection: Connection) -> None:
    assert connection.collection("a") is not connection.collection("b")
    assert sorted(connection.registry) == ["a", "b"]
    assert "a" in connection.registry
    assert "c" not in connection.registry


def test_registries_are_per_connection(transport: RecordingTransport) -> None:
    one = Connection(transport=transport)
    two = Connection(transport=transport)

    assert one.collection("cities") is not two.collection("cities")


@pytest.mark.parametrize("name", [None, ""])
def test_invalid_names_rejected_before_any_request(
    connection: Connection, transport: RecordingTransport, name: str | None
) -> None:
    with pytest.raises(ValidationError):
        connection.registry.get_or_create(name)  # type: ignore[arg-type]

    assert transport.requests == []
    assert len(connection.registry) == 0


def test_get_does_not_create(connection: Connection) -> None:
    assert connection.registry.get("cities") is None
    handle = connection.collection("cities")
    assert connection.registry.get("cities") is handle


def test_injected_lock_guards_get_or_create(transport: RecordingTransport) -> None:
    lock = CountingLock()
    connection = Connection(transport=transport, registry_lock=lock)

    connection.collection("a")
    connection.collection("a")

    assert lock.acquired == 2


def test_nullcontext_lock_for_single_threaded_use(transport: RecordingTransport) -> None:
    connection = Connection(transport=transport, registry_lock=nullcontext())

    assert connection.collection("a") is connection.collection("a")


def test_concurrent_lookups_share_one_handle(connection: Connection) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        handles = list(pool.map(connection.collection, ["cities"] * 64))

    assert all(handle is handles[0] for handle in handles)
    assert len(connection.registry) == 1
