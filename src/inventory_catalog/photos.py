"""
Photo storage for inventory items.

Uploaded photos live as flat files in the cache directory, next to
inventory.json. Every upload gets a fresh name so files are never overwritten.
"""
import contextlib
import logging
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class PhotoUpload:
    """An uploaded photo: the client's file name and a readable binary stream."""
    filename: Optional[str]
    stream: BinaryIO


def generate_filename(original_name: Optional[str]) -> str:
    """Build a collision-resistant name that keeps the original extension."""
    suffix = Path(original_name).suffix if original_name else ""
    return f"{time.time_ns()}-{uuid.uuid4().hex[:12]}{suffix}"


class PhotoAssetManager:
    """Stores and removes photo files under a single storage directory."""

    def __init__(self, storage_dir: Path, reserved_prefixes: Iterable[str] = ()):
        self.storage_dir = Path(storage_dir).resolve()
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        # Names starting with these belong to the store, not to photos
        self.reserved_prefixes = tuple(reserved_prefixes)

    def path_for(self, filename: str) -> Path:
        """Return the absolute path of a stored photo.

        Raises:
            ValueError: if the name would resolve outside the storage directory
        """
        path = (self.storage_dir / filename).resolve()
        if path.parent != self.storage_dir:
            raise ValueError(f"Invalid photo filename: {filename!r}")
        return path

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except ValueError:
            return False

    def store(self, upload: PhotoUpload) -> str:
        """Write the upload to disk and return the generated filename."""
        filename = generate_filename(upload.filename)
        photo_path = self.path_for(filename)

        # "xb" fails instead of overwriting should a name ever repeat
        with open(photo_path, 'xb') as f:
            try:
                shutil.copyfileobj(upload.stream, f)
            except BaseException:
                f.close()
                # The caller never learns the name, so a partial file would be orphaned
                with contextlib.suppress(FileNotFoundError):
                    photo_path.unlink()
                raise

        logger.info("Stored photo %s (uploaded as %s)", filename, upload.filename)
        return filename

    def remove(self, filename: Optional[str]) -> bool:
        """Delete a stored photo. Missing files are not an error.

        Returns:
            True if a file was deleted, False if there was nothing to delete
        """
        if not filename:
            return False

        try:
            photo_path = self.path_for(filename)
        except ValueError:
            logger.warning("Refusing to remove %r: outside %s", filename, self.storage_dir)
            return False

        try:
            photo_path.unlink()
        except FileNotFoundError:
            logger.warning("Photo %s already missing, nothing to remove", filename)
            return False

        logger.info("Removed photo %s", filename)
        return True

    def orphans(self, referenced: Iterable[str]) -> List[str]:
        """List files in the storage directory that no item references."""
        keep = set(referenced)
        return sorted(
            f.name for f in self.storage_dir.iterdir()
            if f.is_file()
            and f.name not in keep
            and not (self.reserved_prefixes and f.name.startswith(self.reserved_prefixes))
        )
