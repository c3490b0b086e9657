"""
Photo Sorter

Moves photos and videos from a source tree into year-month folders in a
destination, dating each file from its metadata or filename and never
creating duplicate content in the destination.
"""

__version__ = "1.0.0"
__author__ = "PhotoSorter Team"

from .config import Config
from .dates import DateResolver, MediaPropertyProvider, NullPropertyProvider, SystemPropertyProvider
from .hashing import calculate_content_hash
from .folder_index import FolderIndex
from .source_file import SourceFile
from .duplicates import SourceDuplicateResolver
from .mover import Mover, MoveResult
from .sorter import PhotoSorter, SortStats
from .reporter import SortReporter

__all__ = [
    'Config',
    'DateResolver',
    'MediaPropertyProvider',
    'NullPropertyProvider',
    'SystemPropertyProvider',
    'calculate_content_hash',
    'FolderIndex',
    'SourceFile',
    'SourceDuplicateResolver',
    'Mover',
    'MoveResult',
    'PhotoSorter',
    'SortStats',
    'SortReporter',
]
