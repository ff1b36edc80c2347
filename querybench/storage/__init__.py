"""Storage backends for persisted session state."""
from .kv import KeyValueStorage, MemoryStorage, JsonFileStorage

__all__ = ["KeyValueStorage", "MemoryStorage", "JsonFileStorage"]
