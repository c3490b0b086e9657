"""Persisted digest index for one destination folder."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .hashing import calculate_content_hash

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".pshashfile"


class FolderIndex:
    """
    Maps content digests to the filenames holding them in one folder.

    The mapping is stored as JSON in a sidecar file inside the folder and is
    rewritten after every change. On load, entries for files that left the
    folder are dropped and any file the sidecar does not mention is hashed
    and added, so the index always matches what is actually on disk.
    """

    def __init__(self, folder_path: Union[str, Path], index_filename: str = INDEX_FILENAME):
        """
        Load the index for a folder.

        Args:
            folder_path: Existing destination folder
            index_filename: Reserved name of the sidecar file

        Raises:
            FileNotFoundError: If the folder does not exist
        """
        self.folder_path = Path(folder_path)
        if not self.folder_path.is_dir():
            raise FileNotFoundError(f"{self.folder_path} does not exist")

        self.index_filename = index_filename
        self.index_path = self.folder_path / index_filename
        self.entries: Dict[str, str] = {}

        self._load()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, digest: str) -> bool:
        return digest in self.entries

    def contains_digest(self, digest: str) -> bool:
        """Check if the folder already holds content with this digest."""
        if not digest:
            raise ValueError("digest must not be empty")
        return digest in self.entries

    def filename_for(self, digest: str) -> Optional[str]:
        return self.entries.get(digest)

    def add_entry(self, filename: str, digest: str) -> None:
        """
        Register a file under its digest (does not copy the file).

        The first filename registered for a digest wins; later calls with the
        same digest change nothing.
        """
        if not filename:
            raise ValueError("filename must not be empty")
        if not digest:
            raise ValueError("digest must not be empty")

        if self._insert(filename, digest):
            self.save()

    def remove_by_digest(self, digest: str) -> bool:
        """
        Delete the file holding a digest and forget it.

        Returns:
            True if a file was deleted, False if the digest is unknown or its
            file is already gone
        """
        filename = self.entries.get(digest)
        if filename is None:
            return False

        file_path = self.folder_path / filename
        if not file_path.is_file():
            return False

        file_path.unlink()
        del self.entries[digest]
        self.save()
        logger.debug(f"Removed {file_path} from index")
        return True

    def save(self) -> None:
        """Write the mapping to the sidecar file."""
        with open(self.index_path, 'w', encoding='utf-8') as f:
            json.dump(self.entries, f, indent=2)

    def _insert(self, filename: str, digest: str) -> bool:
        if digest in self.entries:
            return False
        self.entries[digest] = filename
        return True

    def _load(self) -> None:
        self.entries = self._read_index_file()
        if self._reconcile():
            self.save()

    def _read_index_file(self) -> Dict[str, str]:
        if not self.index_path.is_file():
            return {}

        try:
            with open(self.index_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable index {self.index_path}: {e}")
            return {}

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            logger.warning(f"Ignoring malformed index {self.index_path}")
            return {}

        return data

    def _reconcile(self) -> int:
        """
        Make the mapping match the folder.

        Entries whose file is gone are dropped, and files present in the
        folder but missing from the mapping are hashed and added. A file
        whose content is already mapped under another name cannot be stored
        and is hashed again on every load.

        Returns:
            Number of entries dropped or added
        """
        stale = [
            digest for digest, filename in self.entries.items()
            if not (self.folder_path / filename).is_file()
        ]
        for digest in stale:
            del self.entries[digest]
        if stale:
            logger.info(f"Dropped {len(stale)} index entries for missing files in {self.folder_path}")

        known_names = set(self.entries.values())
        added = 0

        for file_path in sorted(self.folder_path.iterdir()):
            if file_path.name == self.index_filename or not file_path.is_file():
                continue
            if file_path.name in known_names:
                continue

            if self._insert(file_path.name, calculate_content_hash(file_path)):
                added += 1
            known_names.add(file_path.name)

        if added:
            logger.info(f"Indexed {added} existing files in {self.folder_path}")
        return len(stale) + added
