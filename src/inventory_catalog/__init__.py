"""
Inventory Catalog - inventory items with photos, kept in a JSON document

Features:
- Register, update and delete items stored in a single inventory.json
- Bind one uploaded photo per item, with cleanup of replaced/deleted photos
- Case-insensitive substring search over names and descriptions
- FastAPI server and CLI tools for initializing, validating and serving
"""

__version__ = "0.1.0"

from .errors import (
    InventoryError,
    ValidationError,
    ItemNotFound,
    PhotoNotFound,
    AssetMissing,
    PersistenceReadFailure,
    PersistenceWriteFailure,
)
from .models import InventoryItem
from .photos import PhotoAssetManager, PhotoUpload
from .search import QueryMatcher, SearchResult, SearchStatus
from .store import InventoryStore

__all__ = [
    "InventoryError",
    "ValidationError",
    "ItemNotFound",
    "PhotoNotFound",
    "AssetMissing",
    "PersistenceReadFailure",
    "PersistenceWriteFailure",
    "InventoryItem",
    "PhotoAssetManager",
    "PhotoUpload",
    "QueryMatcher",
    "SearchResult",
    "SearchStatus",
    "InventoryStore",
]
