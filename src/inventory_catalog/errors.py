"""
Exceptions raised by the inventory store.

Each error carries the HTTP status the API server answers with.
"""


class InventoryError(Exception):
    """Base class for inventory errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """A required field is missing or empty."""
    status_code = 400


class ItemNotFound(InventoryError):
    status_code = 404

    def __init__(self, item_id: str):
        super().__init__("Item not found")
        self.item_id = item_id


class PhotoNotFound(InventoryError):
    """The item exists but has no photo bound to it."""
    status_code = 404

    def __init__(self, item_id: str):
        super().__init__("Photo not found")
        self.item_id = item_id


class AssetMissing(InventoryError):
    """The item references a photo file that is gone from disk."""
    status_code = 404

    def __init__(self, filename: str):
        super().__init__("Photo file missing")
        self.filename = filename


class PersistenceReadFailure(InventoryError):
    """The inventory document exists but cannot be read or parsed."""


class PersistenceWriteFailure(InventoryError):
    """The inventory document could not be written back."""
