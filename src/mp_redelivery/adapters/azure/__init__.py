"""Azure adapter – Storage Queue backend (main queue + poison queue)."""
from mp_redelivery.adapters.azure.queue import AzureStorageQueueBackend

__all__ = ["AzureStorageQueueBackend"]
