"""Source-side duplicate resolution."""

import logging
from typing import Callable, List, Optional, Sequence

from .folder_index import FolderIndex
from .hashing import calculate_content_hash
from .source_file import SourceFile

logger = logging.getLogger(__name__)


class SourceDuplicateResolver:
    """
    Removes likely duplicates among the source files of one bucket.

    Two files are duplicates when they have the same dedup key and the same
    capture date. The larger file survives; on a size tie the second file in
    comparison order loses. The loser is deleted from the source right away
    and, if an equivalent copy was already moved by an earlier run, that copy
    is deleted from the destination too so the survivor can replace it.
    """

    def __init__(self, folder_index: FolderIndex,
                 log_callback: Optional[Callable[[str], None]] = None):
        """
        Initialize resolver for one destination folder.

        Args:
            folder_index: Index of the bucket's destination folder
            log_callback: Receives human-readable progress messages
        """
        self.folder_index = folder_index
        self.log_callback = log_callback

    def resolve(self, files: Sequence[SourceFile]) -> List[SourceFile]:
        """
        Mark and delete rejected duplicates.

        Args:
            files: All source files assigned to the bucket, in discovery order

        Returns:
            The files that were rejected
        """
        rejected = []

        for file1 in files:
            for file2 in files:
                if file2 is file1:
                    continue
                if not self._is_duplicate_pair(file1, file2):
                    continue

                victim = file2 if file1.size_bytes >= file2.size_bytes else file1
                self._reject(victim)
                rejected.append(victim)

        if rejected:
            logger.info(f"Rejected {len(rejected)} source duplicates in {self.folder_index.folder_path}")
        return rejected

    @staticmethod
    def _is_duplicate_pair(file1: SourceFile, file2: SourceFile) -> bool:
        if not file1.has_date or not file2.has_date:
            return False
        # a previous pair may already have deleted one of them
        if not file1.exists() or not file2.exists():
            return False
        return file1.dedup_key == file2.dedup_key and file1.date_taken == file2.date_taken

    def _reject(self, victim: SourceFile) -> None:
        victim.rejected = True

        digest = calculate_content_hash(victim.path)
        dest_deleted = self.folder_index.remove_by_digest(digest)

        self._log(f"{victim.path} is a duplicate by filename and date taken, deleting "
                  f"(destination duplicate deleted = {dest_deleted}).")
        victim.path.unlink()

    def _log(self, message: str) -> None:
        logger.info(message)
        if self.log_callback:
            self.log_callback(message)
