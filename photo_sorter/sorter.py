"""Sorting source media into year-month destination folders."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
from tqdm import tqdm

from .config import Config
from .dates import DateResolver
from .duplicates import SourceDuplicateResolver
from .folder_index import FolderIndex
from .hashing import calculate_content_hash
from .mover import Mover, discard, is_do_not_move
from .source_file import SourceFile
from .utils import (
    cleanup_empty_directories,
    ensure_directory,
    find_source_files,
    format_bytes,
    get_available_space,
    get_file_size,
    get_current_timestamp,
    is_same_device,
)

logger = logging.getLogger(__name__)


@dataclass
class SortStats:
    """Statistics for one sorting run."""
    buckets: int = 0
    files_found: int = 0
    files_moved: int = 0
    bytes_moved: int = 0
    destination_duplicates: int = 0
    source_duplicates: int = 0
    do_not_move_deleted: int = 0
    empty_skipped: int = 0
    directories_removed: int = 0
    started: str = field(default_factory=get_current_timestamp)
    finished: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            'started': self.started,
            'finished': self.finished,
            'buckets': self.buckets,
            'files_found': self.files_found,
            'files_moved': self.files_moved,
            'bytes_moved': self.bytes_moved,
            'bytes_moved_human': format_bytes(self.bytes_moved),
            'destination_duplicates': self.destination_duplicates,
            'source_duplicates': self.source_duplicates,
            'do_not_move_deleted': self.do_not_move_deleted,
            'empty_skipped': self.empty_skipped,
            'directories_removed': self.directories_removed,
            'errors': list(self.errors),
            'success': len(self.errors) == 0,
        }


class PhotoSorter:
    """
    Sorts photos (and videos) from a source folder into year and month
    folders in a destination folder. Does not create duplicates.
    """

    def __init__(
        self,
        source: Union[str, Path],
        destination: Union[str, Path],
        config: Optional[Config] = None,
        date_resolver: Optional[DateResolver] = None,
        log_callback: Optional[Callable[[str], None]] = None,
        show_progress: bool = False,
    ):
        """
        Initialize sorter.

        Args:
            source: Source folder (must exist)
            destination: Destination folder (must exist)
            config: Configuration instance, defaults when None
            date_resolver: Resolver used to date source files
            log_callback: Receives every progress message, in order
            show_progress: Show a progress bar over buckets

        Raises:
            FileNotFoundError: If a folder does not exist
            NotADirectoryError: If a path is not a folder
            ValueError: If the source is the destination or lies inside it
        """
        self.source = self._require_directory(source)
        self.destination = self._require_directory(destination)
        self._require_separate(self.source, self.destination)
        self.config = config or Config()
        self.date_resolver = date_resolver or DateResolver.from_config(self.config)
        self.log_callback = log_callback
        self.show_progress = show_progress

        self.unknown_label = self.config.get_unknown_date_folder()
        self.index_filename = self.config.get_index_filename()
        self.do_not_move_extensions = self.config.get_do_not_move_extensions()

    @staticmethod
    def _require_directory(path: Union[str, Path]) -> Path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"{path} does not exist")
        if not path.is_dir():
            raise NotADirectoryError(f"{path} is not a directory")
        return path

    @staticmethod
    def _require_separate(source: Path, destination: Path) -> None:
        # sorted files found again in the source would be deleted as already present
        source_real = source.resolve()
        destination_real = destination.resolve()
        if source_real == destination_real:
            raise ValueError(f"Source and destination are the same folder: {source}")
        if destination_real in source_real.parents:
            raise ValueError(f"Source {source} is inside destination {destination}")

    def sort(self) -> SortStats:
        """
        Sort the photos (and videos) from source to destination.

        Returns:
            SortStats for the run
        """
        stats = SortStats()
        self._log(f"PhotoSorter moving from {self.source} to {self.destination}.")

        if self.config.should_check_free_space():
            self.check_free_space()

        files_by_bucket = self.load_source_files(stats)

        with tqdm(files_by_bucket.items(), desc="Sorting buckets", unit="buckets",
                  disable=not self.show_progress) as pbar:
            for bucket, files in pbar:
                self._process_bucket(bucket, files, stats)
                stats.buckets += 1

        if self.config.should_cleanup_empty_directories():
            stats.directories_removed = cleanup_empty_directories(self.source, exclude=self.destination)
            if stats.directories_removed:
                logger.info(f"Cleaned up {stats.directories_removed} empty directories")

        stats.finished = get_current_timestamp()
        logger.info(f"Sort complete: {stats.files_moved} moved, "
                    f"{stats.destination_duplicates + stats.source_duplicates} duplicates deleted, "
                    f"{len(stats.errors)} errors")
        return stats

    def load_source_files(self, stats: Optional[SortStats] = None) -> Dict[str, List[SourceFile]]:
        """
        Discover source files and group them by destination bucket.

        Files with a do-not-move extension are deleted on the way.

        Returns:
            Bucket name -> source files, buckets in first-seen order
        """
        self._log("Loading source files...")
        files_by_bucket: Dict[str, List[SourceFile]] = {}

        for file_path in find_source_files(self.source, exclude=self.destination):
            if is_do_not_move(file_path, self.do_not_move_extensions):
                discard(file_path, self.log_callback)
                if stats is not None:
                    stats.do_not_move_deleted += 1
                continue

            source_file = SourceFile.from_path(file_path, self.date_resolver, self.unknown_label)
            files_by_bucket.setdefault(source_file.bucket_key, []).append(source_file)
            if stats is not None:
                stats.files_found += 1

        return files_by_bucket

    def check_free_space(self) -> None:
        """
        Make sure a cross-device move will fit in the destination.

        Raises:
            OSError: If the destination has less free space than the source files need
        """
        if is_same_device(self.source, self.destination):
            return

        required = sum(
            get_file_size(path)
            for path in find_source_files(self.source, exclude=self.destination)
            if not is_do_not_move(path, self.do_not_move_extensions)
        )
        available = get_available_space(self.destination)
        if required > available:
            raise OSError(f"Insufficient space in {self.destination}: "
                          f"need {format_bytes(required)}, have {format_bytes(available)}")

    def _process_bucket(self, bucket: str, files: List[SourceFile], stats: SortStats) -> None:
        self._log(f"Processing {bucket}.")

        dest_folder = self.destination / bucket
        if not ensure_directory(dest_folder):
            raise OSError(f"Failed to create directory {dest_folder}")

        folder_index = FolderIndex(dest_folder, self.index_filename)

        # check for any source duplicates in the bucket
        resolver = SourceDuplicateResolver(folder_index, self.log_callback)
        stats.source_duplicates += len(resolver.resolve(files))

        mover = Mover(folder_index, self.log_callback)
        for source_file in files:
            if source_file.size_bytes == 0:
                stats.empty_skipped += 1
                continue
            if source_file.rejected:
                continue

            try:
                digest = calculate_content_hash(source_file.path)
                result = mover.move(source_file, digest)
            except OSError as e:
                error_msg = f"Failed to sort {source_file.path}: {e}"
                logger.error(error_msg)
                stats.errors.append(error_msg)
                continue

            if result.deleted_duplicate:
                stats.destination_duplicates += 1
            else:
                stats.files_moved += 1
                stats.bytes_moved += source_file.size_bytes

    def _log(self, message: str) -> None:
        if not message or not message.strip():
            return
        logger.info(message)
        if self.log_callback:
            self.log_callback(message)
