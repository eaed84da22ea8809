"""
Consistency checks for an inventory cache directory.
"""
from collections import Counter
from typing import List

from .store import InventoryStore


def validate_inventory(store: InventoryStore) -> List[str]:
    """
    Check the inventory document against the files on disk.

    Reports duplicate IDs, empty names, bound photos whose file is missing,
    and photo files no item references.

    Returns:
        List of human readable issues, empty when everything is consistent
    """
    issues = []
    items = store.list()

    id_counts = Counter(item.id for item in items)
    for item_id, count in id_counts.items():
        if count > 1:
            issues.append(f"⚠️  Duplicate item ID: {item_id} ({count} records)")

    for item in items:
        if not item.name.strip():
            issues.append(f"⚠️  {item.id}: empty name")
        if item.photo_filename and not store.photos.exists(item.photo_filename):
            issues.append(f"❌ {item.id}: photo file '{item.photo_filename}' missing")

    referenced = [item.photo_filename for item in items if item.photo_filename]
    for filename in store.photos.orphans(referenced):
        issues.append(f"⚠️  Orphan file not bound to any item: {filename}")

    return issues
