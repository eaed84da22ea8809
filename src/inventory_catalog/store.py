"""
JSON-document backed inventory store.

The whole collection lives in a single inventory.json in the cache directory.
Every operation reads the full document, applies its change in memory and
writes the full document back; nothing is cached between calls.
"""
import contextlib
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

import pydantic

from .errors import (
    ItemNotFound,
    PersistenceReadFailure,
    PersistenceWriteFailure,
    PhotoNotFound,
    AssetMissing,
    ValidationError,
)
from .models import InventoryItem
from .photos import PhotoAssetManager, PhotoUpload
from .search import QueryMatcher, SearchResult, load_aliases

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "inventory.json"
ALIASES_NAME = "aliases.json"


def find_item(items: List[InventoryItem], item_id: str) -> InventoryItem:
    for item in items:
        if item.id == item_id:
            return item
    raise ItemNotFound(item_id)


def save_json(items: List[InventoryItem], output_file: Path) -> None:
    """Write the item list to output_file, replacing it atomically."""
    payload = json.dumps([item.to_record() for item in items], ensure_ascii=False, indent=2)
    tmp_path = output_file.with_name(output_file.name + ".tmp")

    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, output_file)
    except OSError as e:
        logger.error("Failed to write %s: %s", output_file, e)
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise PersistenceWriteFailure(f"Failed to save inventory: {e}") from e


def load_json(json_file: Path) -> List[InventoryItem]:
    """Read the item list from json_file. A missing file is an empty inventory.

    Raises:
        PersistenceReadFailure: if the file exists but cannot be read or parsed
    """
    try:
        with open(json_file, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        raise PersistenceReadFailure(f"Cannot read {json_file}: {e}") from e

    if not isinstance(raw, list):
        raise PersistenceReadFailure(f"Cannot read {json_file}: expected a JSON array")

    try:
        return [InventoryItem.model_validate(record) for record in raw]
    except pydantic.ValidationError as e:
        raise PersistenceReadFailure(f"Cannot read {json_file}: {e}") from e


class InventoryStore:
    """Inventory items persisted in <cache_dir>/inventory.json.

    Mutations are serialized by a lock held across the whole
    load -> mutate -> save cycle, so concurrent requests in one process
    cannot overwrite each other's changes. Reads take no lock; the document
    is always replaced atomically. Moving a corrupt document aside happens
    under the lock, after re-reading it.
    """

    def __init__(
        self,
        cache_dir: Path,
        reset_on_corrupt: bool = False,
        photos: Optional[PhotoAssetManager] = None,
        matcher: Optional[QueryMatcher] = None,
    ):
        self.cache_dir = Path(cache_dir).resolve()
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.document_path = self.cache_dir / DOCUMENT_NAME
        self.reset_on_corrupt = reset_on_corrupt

        if photos is None:
            photos = PhotoAssetManager(self.cache_dir, reserved_prefixes=(DOCUMENT_NAME, ALIASES_NAME))
        if matcher is None:
            matcher = QueryMatcher(load_aliases(self.cache_dir / ALIASES_NAME))
        self.photos = photos
        self.matcher = matcher

        # Reentrant: quarantining a corrupt document happens inside transactions too
        self._write_lock = threading.RLock()

    # Persistence

    def _load(self) -> List[InventoryItem]:
        try:
            return load_json(self.document_path)
        except PersistenceReadFailure as e:
            logger.error("Inventory document is unreadable: %s", e.message)
            if not self.reset_on_corrupt:
                raise
            return self._quarantine_document()

    def _quarantine_document(self) -> List[InventoryItem]:
        """Move a corrupt document aside and start from an empty inventory."""
        with self._write_lock:
            # A writer may have replaced the document since it was read
            try:
                return load_json(self.document_path)
            except PersistenceReadFailure:
                pass

            timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
            backup_path = self.document_path.with_name(
                f"{self.document_path.name}.corrupt-{timestamp}-{uuid.uuid4().hex[:8]}"
            )
            try:
                os.replace(self.document_path, backup_path)
            except FileNotFoundError:
                return []
            except OSError as e:
                raise PersistenceReadFailure(f"Cannot move corrupt inventory aside: {e}") from e

        logger.warning("Starting with an empty inventory; corrupt document kept as %s", backup_path.name)
        return []

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[List[InventoryItem]]:
        """Load the items, let the caller mutate them, then save.

        Nothing is written if the body raises.
        """
        with self._write_lock:
            items = self._load()
            yield items
            save_json(items, self.document_path)

    def _new_id(self, items: List[InventoryItem]) -> str:
        taken = {item.id for item in items}
        while True:
            item_id = uuid.uuid4().hex
            if item_id not in taken:
                return item_id

    # Queries

    def list(self) -> List[InventoryItem]:
        """All items in insertion order."""
        return self._load()

    def get(self, item_id: str) -> InventoryItem:
        return find_item(self._load(), item_id)

    def search(self, query: Optional[str]) -> SearchResult:
        return self.matcher.search(self._load(), query)

    def photo_path(self, item_id: str) -> Path:
        """Path of the photo bound to an item.

        Raises:
            PhotoNotFound: unknown item, or no photo bound
            AssetMissing: a photo is bound but its file is gone
        """
        try:
            item = self.get(item_id)
        except ItemNotFound:
            raise PhotoNotFound(item_id) from None

        if not item.photo_filename:
            raise PhotoNotFound(item_id)
        if not self.photos.exists(item.photo_filename):
            raise AssetMissing(item.photo_filename)
        return self.photos.path_for(item.photo_filename)

    # Mutations

    def create(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        photo: Optional[PhotoUpload] = None,
    ) -> InventoryItem:
        """Register a new item, optionally with a photo."""
        if not name or not name.strip():
            raise ValidationError("name is required")

        photo_filename = None
        try:
            with self._transaction() as items:
                if photo is not None:
                    photo_filename = self.photos.store(photo)
                item = InventoryItem(
                    id=self._new_id(items),
                    name=name,
                    description=description or "",
                    photo_filename=photo_filename,
                )
                items.append(item)
        except Exception:
            # The photo would be an orphan without its record
            self.photos.remove(photo_filename)
            raise

        logger.info("Created item %s (%s)", item.id, item.name)
        return item

    def update(
        self,
        item_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        """Replace name and/or description. None means "leave unchanged"."""
        with self._transaction() as items:
            item = find_item(items, item_id)
            if name is not None and not name.strip():
                raise ValidationError("name must not be empty")
            if name is not None:
                item.name = name
            if description is not None:
                item.description = description

        logger.info("Updated item %s", item_id)
        return item

    def delete(self, item_id: str) -> InventoryItem:
        """Remove an item and its photo file."""
        with self._transaction() as items:
            item = find_item(items, item_id)
            items.remove(item)

        # Only once the record is gone from disk
        self.photos.remove(item.photo_filename)

        logger.info("Deleted item %s", item_id)
        return item

    def replace_photo(self, item_id: str, photo: Optional[PhotoUpload]) -> InventoryItem:
        """Bind a new photo to an item, removing the previous one."""
        old_filename = None
        new_filename = None
        try:
            with self._transaction() as items:
                item = find_item(items, item_id)
                if photo is None:
                    raise ValidationError("No photo uploaded")
                new_filename = self.photos.store(photo)
                old_filename = item.photo_filename
                item.photo_filename = new_filename
        except Exception:
            self.photos.remove(new_filename)
            raise

        self.photos.remove(old_filename)

        logger.info("Replaced photo of item %s with %s", item_id, new_filename)
        return item
