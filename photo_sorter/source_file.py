"""Source files awaiting classification."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

UNKNOWN_DATE_FOLDER = "An Unknown Date"


def make_dedup_key(filename: str) -> str:
    """
    Normalize a filename for source duplicate comparison.

    Drops everything inside parentheses (and the parentheses) and all
    spaces, so "a (1).jpg" and "a.jpg" share the key "a.jpg".
    """
    chars = []
    copy_char = True
    for c in filename:
        if c == '(':
            copy_char = False
        elif c == ')':
            copy_char = True
        elif c == ' ':
            continue
        elif copy_char:
            chars.append(c)
    return ''.join(chars)


def make_bucket_key(date_taken: Optional[datetime], unknown_label: str = UNKNOWN_DATE_FOLDER) -> str:
    """Destination folder name: YYYY-MM, or the unknown date label."""
    if date_taken is None:
        return unknown_label
    return f"{date_taken.year:04d}-{date_taken.month:02d}"


@dataclass
class SourceFile:
    """A file found in the source tree that may be moved to the destination."""
    path: Path
    size_bytes: int
    date_taken: Optional[datetime] = None
    unknown_label: str = UNKNOWN_DATE_FOLDER
    rejected: bool = False
    bucket_key: str = field(init=False)
    dedup_key: str = field(init=False)

    def __post_init__(self):
        self.path = Path(self.path)
        self.bucket_key = make_bucket_key(self.date_taken, self.unknown_label)
        self.dedup_key = make_dedup_key(self.path.name)

    @classmethod
    def from_path(cls, path: Path, date_resolver, unknown_label: str = UNKNOWN_DATE_FOLDER) -> 'SourceFile':
        """Stat and date a file once."""
        path = Path(path)
        return cls(
            path=path,
            size_bytes=path.stat().st_size,
            date_taken=date_resolver.resolve(path),
            unknown_label=unknown_label,
        )

    @property
    def name(self) -> str:
        """Get filename without path."""
        return self.path.name

    @property
    def has_date(self) -> bool:
        return self.date_taken is not None

    def exists(self) -> bool:
        return self.path.is_file()
