"""Azure Storage Queue adapter – AzureStorageQueueBackend.

A main queue plus a ``-poison`` queue used as the dead-letter channel.
Bodies are passed through untouched; Base64 wrapping is the codec's job
(``EnvelopeCodec(base64_encoding=True)``), so no SDK encode policy is set.
"""
from __future__ import annotations

import types
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from mp_redelivery.kernel.errors import TransportError
from mp_redelivery.kernel.messaging import Lease, QueueBackend, ReceivedMessage
from mp_redelivery.observability.logging import get_logger

if TYPE_CHECKING:
    from mp_redelivery.config.settings import RedeliverySettings

logger = get_logger(__name__)


def _require_azure() -> Any:
    try:
        from azure.core.exceptions import AzureError, ResourceExistsError
        from azure.storage.queue.aio import QueueClient
    except ImportError as exc:
        raise ImportError("Install 'mp-redelivery[azure]' to use the Azure Storage Queue adapter") from exc
    return types.SimpleNamespace(
        QueueClient=QueueClient,
        AzureError=AzureError,
        ResourceExistsError=ResourceExistsError,
    )


def _seconds(value: timedelta | None) -> int | None:
    if value is None:
        return None
    return int(value.total_seconds())


def _to_received(message: Any) -> ReceivedMessage | None:
    if message is None:
        return None
    return ReceivedMessage(
        body=message.content,
        lease=Lease(
            message_id=message.id,
            receipt=message.pop_receipt,
            delivery_count=message.dequeue_count or 1,
        ),
    )


class AzureStorageQueueBackend(QueueBackend):
    """``azure-storage-queue`` (async client) implementation of :class:`QueueBackend`.

    Example::

        backend = AzureStorageQueueBackend.from_connection_string(
            "UseDevelopmentStorage=true", "myqueue-items", "myqueue-items-poison"
        )
        await backend.create_queues()
    """

    def __init__(
        self,
        queue_client: Any,
        dead_letter_client: Any,
        *,
        lease_duration: timedelta = timedelta(seconds=30),
    ) -> None:
        self._sdk = _require_azure()
        self._queue = queue_client
        self._dead_letter = dead_letter_client
        self._lease_seconds = _seconds(lease_duration)

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        queue_name: str,
        dead_letter_queue_name: str | None = None,
        *,
        lease_duration: timedelta = timedelta(seconds=30),
    ) -> "AzureStorageQueueBackend":
        sdk = _require_azure()
        return cls(
            sdk.QueueClient.from_connection_string(connection_string, queue_name),
            sdk.QueueClient.from_connection_string(
                connection_string, dead_letter_queue_name or f"{queue_name}-poison"
            ),
            lease_duration=lease_duration,
        )

    @classmethod
    def from_settings(cls, settings: RedeliverySettings) -> "AzureStorageQueueBackend":
        """Build both queue clients from the ``REDELIVERY_*`` connection and queue settings."""
        return cls.from_connection_string(
            settings.connection_string,
            settings.queue_name,
            settings.dead_letter_queue_name,
            lease_duration=settings.lease_duration,
        )

    async def create_queues(self) -> None:
        """Create both queues, ignoring ones that already exist."""
        for client in (self._queue, self._dead_letter):
            try:
                await client.create_queue()
            except self._sdk.ResourceExistsError:
                pass
            except self._sdk.AzureError as exc:
                raise TransportError("create_queue", str(exc), cause=exc) from exc

    async def receive(self) -> ReceivedMessage | None:
        try:
            message = await self._queue.receive_message(visibility_timeout=self._lease_seconds)
        except self._sdk.AzureError as exc:
            raise TransportError("receive", str(exc), cause=exc) from exc
        return _to_received(message)

    async def requeue(self, raw: str, visibility_delay: timedelta, ttl: timedelta | None = None) -> None:
        try:
            await self._queue.send_message(
                raw,
                visibility_timeout=_seconds(visibility_delay),
                time_to_live=_seconds(ttl),
            )
        except self._sdk.AzureError as exc:
            raise TransportError("requeue", str(exc), cause=exc) from exc
        logger.debug("azure_queue.requeued", delay_s=visibility_delay.total_seconds())

    async def send_dead_letter(self, raw: str, ttl: timedelta | None = None) -> None:
        try:
            await self._dead_letter.send_message(raw, visibility_timeout=0, time_to_live=_seconds(ttl))
        except self._sdk.AzureError as exc:
            raise TransportError("send_dead_letter", str(exc), cause=exc) from exc

    async def complete_lease(self, lease: Lease) -> None:
        try:
            await self._queue.delete_message(lease.message_id, pop_receipt=lease.receipt)
        except self._sdk.AzureError as exc:
            raise TransportError("complete_lease", str(exc), cause=exc) from exc

    async def receive_dead_letter(self) -> ReceivedMessage | None:
        try:
            message = await self._dead_letter.receive_message(visibility_timeout=self._lease_seconds)
        except self._sdk.AzureError as exc:
            raise TransportError("receive_dead_letter", str(exc), cause=exc) from exc
        return _to_received(message)

    async def complete_dead_letter(self, lease: Lease) -> None:
        try:
            await self._dead_letter.delete_message(lease.message_id, pop_receipt=lease.receipt)
        except self._sdk.AzureError as exc:
            raise TransportError("complete_dead_letter", str(exc), cause=exc) from exc

    async def close(self) -> None:
        await self._queue.close()
        await self._dead_letter.close()

    async def __aenter__(self) -> "AzureStorageQueueBackend":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


__all__ = ["AzureStorageQueueBackend"]
