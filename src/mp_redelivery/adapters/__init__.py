"""Adapters – optional backends. Import the sub-package you need, e.g.
``from mp_redelivery.adapters.azure import AzureStorageQueueBackend``."""
