"""Capture date resolution for photos and videos."""

import json
import subprocess
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

import exifread
from hachoir.metadata import extractMetadata
from hachoir.parser import createParser

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_PATTERNS = ['IMG_', 'BURST', 'IMG-', 'GIF_Action_']
DEFAULT_PROPERTY_COLUMNS = ['Media created', 'Date taken']

MEDIA_CREATED = 'Media created'
DATE_TAKEN = 'Date taken'

# Left-to-right and right-to-left marks that Windows puts around dates
BIDI_MARKS = ('\u200e', '\u200f')

# QuickTime counts from 1904; some tools report video dates 66 years early
VIDEO_EPOCH_YEAR_OFFSET = 66
EPOCH_YEAR = 1970

PROPERTY_DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S.%f',
    '%Y-%m-%d %H:%M:%S',
    '%Y:%m:%d %H:%M:%S',
    '%m/%d/%Y %I:%M %p',
    '%m/%d/%Y %H:%M',
    '%Y-%m-%d',
]

DateStrategy = Callable[[Path], Optional[datetime]]


class MediaPropertyProvider:
    """Looks up an extended media property of a file by column name."""

    def get_property(self, path: Path, name: str) -> Optional[str]:
        """Return the raw property value, or None if the file has none."""
        raise NotImplementedError


class NullPropertyProvider(MediaPropertyProvider):
    """Provider for platforms or runs without extended media properties."""

    def get_property(self, path: Path, name: str) -> Optional[str]:
        return None


class SystemPropertyProvider(MediaPropertyProvider):
    """
    Reads media properties with the tools available on the host.

    "Media created" is the container creation_time tag reported by ffprobe,
    "Date taken" is the creation date hachoir extracts from the file.
    Both calls block until the tool returns.
    """

    def __init__(self, ffprobe_binary: str = 'ffprobe'):
        self.ffprobe_binary = ffprobe_binary

    def get_property(self, path: Path, name: str) -> Optional[str]:
        if name == MEDIA_CREATED:
            return self._media_created(path)
        if name == DATE_TAKEN:
            return self._date_taken(path)
        logger.debug(f"Unsupported media property: {name}")
        return None

    def _media_created(self, path: Path) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.ffprobe_binary, '-v', 'quiet', '-print_format', 'json',
                 '-show_entries', 'format_tags=creation_time', str(path)],
                capture_output=True, text=True
            )
        except OSError as e:
            logger.debug(f"ffprobe unavailable for {path}: {e}")
            return None

        if result.returncode != 0:
            return None
        try:
            data = json.loads(result.stdout or '{}')
        except ValueError:
            return None
        return data.get('format', {}).get('tags', {}).get('creation_time') or None

    def _date_taken(self, path: Path) -> Optional[str]:
        try:
            parser = createParser(str(path))
            if not parser:
                return None
            with parser:
                metadata = extractMetadata(parser)
        except Exception as e:
            logger.debug(f"hachoir could not read {path}: {e}")
            return None

        if not metadata or not metadata.has('creation_date'):
            return None
        return str(metadata.get('creation_date'))


def normalize_exif_datetime(raw: str) -> str:
    """
    Turn an EXIF "YYYY:MM:DD HH:MM:SS" value into "YYYY-MM-DD HH:MM:SS".

    Only the first two colons are date separators; the time keeps its own.
    """
    value = raw.replace('\x00', '').strip()
    return value.replace(':', '-', 2)


def strip_bidi_marks(value: str) -> str:
    """Remove U+200E / U+200F formatting characters."""
    return ''.join(c for c in value if c not in BIDI_MARKS).strip()


def parse_property_date(value: str) -> Optional[datetime]:
    """Parse a media property date with the accepted formats."""
    cleaned = strip_bidi_marks(value)
    if not cleaned:
        return None
    for fmt in PROPERTY_DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def correct_epoch_year(date: datetime) -> datetime:
    """Add 66 years to dates before 1970 (video metadata epoch bug)."""
    if date.year >= EPOCH_YEAR:
        return date
    year = date.year + VIDEO_EPOCH_YEAR_OFFSET
    try:
        return date.replace(year=year)
    except ValueError:
        # 29 February in a year that has none
        return date.replace(year=year, day=28)


class DateResolver:
    """
    Resolves the capture date of a media file.

    Strategies run in order and the first definite answer wins:
    embedded EXIF capture time, extended media properties, then a date
    encoded in a known camera filename. A file nothing can date resolves
    to None.
    """

    def __init__(
        self,
        property_provider: Optional[MediaPropertyProvider] = None,
        filename_patterns: Optional[Iterable[str]] = None,
        property_columns: Optional[Iterable[str]] = None,
    ):
        self.property_provider = property_provider or SystemPropertyProvider()
        self.filename_patterns = list(filename_patterns if filename_patterns is not None
                                      else DEFAULT_FILENAME_PATTERNS)
        self.property_columns = list(property_columns if property_columns is not None
                                     else DEFAULT_PROPERTY_COLUMNS)
        self.strategies: List[DateStrategy] = [
            self.date_from_embedded_tag,
            self.date_from_media_properties,
            self.date_from_filename,
        ]

    @classmethod
    def from_config(cls, config, property_provider: Optional[MediaPropertyProvider] = None):
        """Build a resolver from a Config instance."""
        if property_provider is None and not config.use_media_properties():
            property_provider = NullPropertyProvider()
        return cls(
            property_provider=property_provider,
            filename_patterns=config.get_filename_patterns(),
            property_columns=config.get_property_columns(),
        )

    def resolve(self, path: Union[str, Path]) -> Optional[datetime]:
        """
        Get the best-effort date a file was taken.

        Args:
            path: Path to media file

        Returns:
            Capture datetime, or None if the date is unknown
        """
        path = Path(path)
        taken = None
        for strategy in self.strategies:
            taken = strategy(path)
            if taken is not None:
                logger.debug(f"{path.name}: {strategy.__name__} -> {taken}")
                break

        if taken is not None:
            taken = correct_epoch_year(taken)
        return taken

    def date_from_embedded_tag(self, path: Path) -> Optional[datetime]:
        """Read EXIF DateTimeOriginal."""
        try:
            with open(path, 'rb') as f:
                tags = exifread.process_file(f, stop_tag='DateTimeOriginal', details=False)
            tag = tags.get('EXIF DateTimeOriginal')
            if not tag:
                return None
            return datetime.strptime(normalize_exif_datetime(str(tag)), '%Y-%m-%d %H:%M:%S')
        except Exception as e:
            logger.debug(f"Could not read EXIF date from {path}: {e}")
            return None

    def date_from_media_properties(self, path: Path) -> Optional[datetime]:
        """Query the property provider for each configured column."""
        for column in self.property_columns:
            try:
                value = self.property_provider.get_property(path, column)
                if value and value.strip():
                    taken = parse_property_date(value)
                    if taken is not None:
                        return taken
            except Exception as e:
                logger.debug(f"Could not read '{column}' for {path}: {e}")
        return None

    def date_from_filename(self, path: Path) -> Optional[datetime]:
        """Find a YYYYMMDD date right after a known camera filename prefix."""
        text = str(path)
        for prefix in self.filename_patterns:
            index = text.find(prefix)
            while index >= 0:
                taken = _parse_yyyymmdd(text[index + len(prefix):index + len(prefix) + 8])
                if taken is not None:
                    return taken
                index = text.find(prefix, index + 1)
        return None


def _parse_yyyymmdd(digits: str) -> Optional[datetime]:
    if len(digits) != 8 or not digits.isdigit():
        return None
    try:
        return datetime(int(digits[:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError:
        return None
