"""Unit tests for the Azure Storage Queue adapter (SDK mocked)."""

from __future__ import annotations

import asyncio
import types
from datetime import timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mp_redelivery.adapters.azure import AzureStorageQueueBackend
from mp_redelivery.config import RedeliverySettings
from mp_redelivery.kernel.errors import TransportError
from mp_redelivery.kernel.messaging import Lease


class _FakeAzureError(Exception):
    pass


class _FakeResourceExistsError(_FakeAzureError):
    pass


def _sdk() -> types.SimpleNamespace:
    return types.SimpleNamespace(
        QueueClient=MagicMock(),
        AzureError=_FakeAzureError,
        ResourceExistsError=_FakeResourceExistsError,
    )


def _client() -> MagicMock:
    client = MagicMock()
    client.create_queue = AsyncMock()
    client.receive_message = AsyncMock(return_value=None)
    client.send_message = AsyncMock()
    client.delete_message = AsyncMock()
    client.close = AsyncMock()
    return client


def _backend(**kwargs: Any) -> tuple[AzureStorageQueueBackend, MagicMock, MagicMock]:
    queue, dead_letter = _client(), _client()
    with patch("mp_redelivery.adapters.azure.queue._require_azure", return_value=_sdk()):
        backend = AzureStorageQueueBackend(queue, dead_letter, **kwargs)
    return backend, queue, dead_letter


class TestAzureStorageQueueBackend:
    def test_from_connection_string_defaults_poison_queue(self) -> None:
        sdk = _sdk()
        with patch("mp_redelivery.adapters.azure.queue._require_azure", return_value=sdk):
            AzureStorageQueueBackend.from_connection_string("UseDevelopmentStorage=true", "orders")
        names = [c.args[1] for c in sdk.QueueClient.from_connection_string.call_args_list]
        assert names == ["orders", "orders-poison"]

    def test_from_settings_uses_connection_queue_names_and_lease(self) -> None:
        sdk = _sdk()
        queue, dead_letter = _client(), _client()
        sdk.QueueClient.from_connection_string.side_effect = [queue, dead_letter]
        settings = RedeliverySettings(
            connection_string="AccountName=a;AccountKey=k",
            queue_name="orders",
            dead_letter_queue_name="orders-dlq",
            lease_seconds=60,
        )
        with patch("mp_redelivery.adapters.azure.queue._require_azure", return_value=sdk):
            backend = AzureStorageQueueBackend.from_settings(settings)

        calls = [c.args for c in sdk.QueueClient.from_connection_string.call_args_list]
        assert calls == [
            ("AccountName=a;AccountKey=k", "orders"),
            ("AccountName=a;AccountKey=k", "orders-dlq"),
        ]
        asyncio.run(backend.receive())
        queue.receive_message.assert_awaited_once_with(visibility_timeout=60)

    def test_create_queues_ignores_existing(self) -> None:
        backend, queue, dead_letter = _backend()
        queue.create_queue.side_effect = _FakeResourceExistsError("exists")
        asyncio.run(backend.create_queues())
        dead_letter.create_queue.assert_awaited_once()

    def test_receive_maps_message(self) -> None:
        backend, queue, _ = _backend(lease_duration=timedelta(seconds=45))
        queue.receive_message.return_value = types.SimpleNamespace(
            content='{"message":"x"}', id="m-1", pop_receipt="r-1", dequeue_count=3
        )

        received = asyncio.run(backend.receive())

        queue.receive_message.assert_awaited_once_with(visibility_timeout=45)
        assert received is not None
        assert received.body == '{"message":"x"}'
        assert received.lease == Lease("m-1", "r-1", 3)

    def test_receive_idle(self) -> None:
        backend, _, _ = _backend()
        assert asyncio.run(backend.receive()) is None

    def test_requeue_sets_visibility_and_ttl(self) -> None:
        backend, queue, _ = _backend()
        asyncio.run(backend.requeue("body", timedelta(minutes=5), ttl=timedelta(days=7)))
        queue.send_message.assert_awaited_once_with(
            "body", visibility_timeout=300, time_to_live=604800
        )

    def test_dead_letter_goes_to_poison_queue(self) -> None:
        backend, queue, dead_letter = _backend()
        asyncio.run(backend.send_dead_letter("body", ttl=None))
        dead_letter.send_message.assert_awaited_once_with(
            "body", visibility_timeout=0, time_to_live=None
        )
        queue.send_message.assert_not_awaited()

    def test_complete_lease_deletes_with_receipt(self) -> None:
        backend, queue, _ = _backend()
        asyncio.run(backend.complete_lease(Lease("m-1", "r-1")))
        queue.delete_message.assert_awaited_once_with("m-1", pop_receipt="r-1")

    def test_receive_dead_letter_reads_poison_queue(self) -> None:
        backend, queue, dead_letter = _backend(lease_duration=timedelta(seconds=20))
        dead_letter.receive_message.return_value = types.SimpleNamespace(
            content="poisoned", id="d-1", pop_receipt="r-9", dequeue_count=None
        )

        received = asyncio.run(backend.receive_dead_letter())

        dead_letter.receive_message.assert_awaited_once_with(visibility_timeout=20)
        queue.receive_message.assert_not_awaited()
        assert received is not None
        assert received.body == "poisoned"
        assert received.lease == Lease("d-1", "r-9", 1)

    def test_complete_dead_letter_deletes_from_poison_queue(self) -> None:
        backend, queue, dead_letter = _backend()
        asyncio.run(backend.complete_dead_letter(Lease("d-1", "r-9")))
        dead_letter.delete_message.assert_awaited_once_with("d-1", pop_receipt="r-9")
        queue.delete_message.assert_not_awaited()

    @pytest.mark.parametrize(
        ("operation", "method", "call"),
        [
            ("send_dead_letter", "send_message", lambda b: b.send_dead_letter("x")),
            ("receive_dead_letter", "receive_message", lambda b: b.receive_dead_letter()),
            ("complete_dead_letter", "delete_message", lambda b: b.complete_dead_letter(Lease("m", "r"))),
        ],
    )
    def test_dead_letter_sdk_errors_become_transport_errors(
        self, operation: str, method: str, call: Any
    ) -> None:
        backend, _, dead_letter = _backend()
        getattr(dead_letter, method).side_effect = _FakeAzureError("boom")
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(call(backend))
        assert exc_info.value.operation == operation

    @pytest.mark.parametrize(
        ("operation", "method", "call"),
        [
            ("receive", "receive_message", lambda b: b.receive()),
            ("requeue", "send_message", lambda b: b.requeue("x", timedelta(0))),
            ("complete_lease", "delete_message", lambda b: b.complete_lease(Lease("m", "r"))),
        ],
    )
    def test_sdk_errors_become_transport_errors(self, operation: str, method: str, call: Any) -> None:
        backend, queue, _ = _backend()
        getattr(queue, method).side_effect = _FakeAzureError("boom")
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(call(backend))
        assert exc_info.value.operation == operation
        assert isinstance(exc_info.value.__cause__, _FakeAzureError)

    def test_async_context_manager_closes_clients(self) -> None:
        backend, queue, dead_letter = _backend()

        async def scenario() -> None:
            async with backend:
                pass

        asyncio.run(scenario())
        queue.close.assert_awaited_once()
        dead_letter.close.assert_awaited_once()

    def test_require_azure_hint(self) -> None:
        with patch.dict("sys.modules", {"azure.storage.queue.aio": None}):
            from mp_redelivery.adapters.azure.queue import _require_azure

            with pytest.raises(ImportError, match=r"mp-redelivery\[azure\]"):
                _require_azure()
