"""Moving source files into a destination bucket folder."""

import os
import shutil
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .folder_index import FolderIndex
from .source_file import SourceFile

logger = logging.getLogger(__name__)

DO_NOT_MOVE_EXTENSIONS = ('.json', '.pshashfile')


@dataclass
class MoveResult:
    """Outcome of handling one source file."""
    source: Path
    destination: Optional[Path] = None
    deleted_duplicate: bool = False

    @property
    def moved(self) -> bool:
        return self.destination is not None


def is_do_not_move(path: Path, extensions: Iterable[str] = DO_NOT_MOVE_EXTENSIONS) -> bool:
    """Check if a file is a sidecar that is deleted instead of moved."""
    # endswith rather than suffix so dotfiles like ".pshashfile" match
    name = Path(path).name.lower()
    return any(name.endswith(ext.lower()) for ext in extensions)


def unique_filename(folder: Path, filename: str) -> str:
    """
    Find a name that does not exist yet in a folder.

    Tries the original name, then name_0001.ext, name_0002.ext and so on.
    """
    stem, ext = os.path.splitext(filename)
    candidate = filename
    unique = 0
    while (folder / candidate).exists():
        unique += 1
        candidate = f"{stem}_{unique:04d}{ext}"
    return candidate


class Mover:
    """Moves files into one destination folder without creating duplicates."""

    def __init__(self, folder_index: FolderIndex,
                 log_callback: Optional[Callable[[str], None]] = None):
        self.folder_index = folder_index
        self.destination = folder_index.folder_path
        self.log_callback = log_callback

    def unique_destination(self, filename: str) -> Path:
        return self.destination / unique_filename(self.destination, filename)

    def move(self, source_file: SourceFile, digest: str) -> MoveResult:
        """
        Move a file into the folder, or delete it if its content is already there.

        Args:
            source_file: Surviving, non-empty source file
            digest: Content digest of the source file

        Returns:
            MoveResult describing what happened
        """
        if self.folder_index.contains_digest(digest):
            self._log(f"{source_file.name} already exists in {self.destination}, deleting.")
            source_file.path.unlink()
            return MoveResult(source=source_file.path, deleted_duplicate=True)

        dest_path = self.unique_destination(source_file.name)
        self._log(f"Moving {source_file.name} to {dest_path}.")

        shutil.move(str(source_file.path), str(dest_path))
        self.folder_index.add_entry(dest_path.name, digest)

        return MoveResult(source=source_file.path, destination=dest_path)

    def _log(self, message: str) -> None:
        logger.info(message)
        if self.log_callback:
            self.log_callback(message)


def discard(path: Path, log_callback: Optional[Callable[[str], None]] = None) -> None:
    """Delete a do-not-move file from the source tree."""
    message = f"{path} has a do not move extension, deleting."
    logger.info(message)
    if log_callback:
        log_callback(message)
    Path(path).unlink()
