from fieldcms.storage.backends import InMemoryStorage, JsonFileStorage, StorageBackend
from fieldcms.storage.context import StorageContextAdapter, settings_key

__all__ = ["InMemoryStorage", "JsonFileStorage", "StorageBackend", "StorageContextAdapter", "settings_key"]
