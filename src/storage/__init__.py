"""
Storage module.

Handles persistence of content items and the rating ledger.
"""

from src.storage.base import Storage, PersistError
from src.storage.json_files import JsonFileStorage
from src.storage.memory import InMemoryStorage

__all__ = [
    "Storage",
    "PersistError",
    "JsonFileStorage",
    "InMemoryStorage",
]
