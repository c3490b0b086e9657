"""Content hashing that ignores JPEG metadata segments."""

import hashlib
import os
import struct
import logging
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)

JPEG_EXTENSIONS = ('.jpg', '.jpeg')

SOI_MARKER = 0xFFD8
SOS_MARKER = 0xFFDA

CHUNK_SIZE = 65536


class JpegStructureError(ValueError):
    """Raised when a JPEG segment table cannot be walked."""


def calculate_content_hash(file_path: Union[str, Path]) -> str:
    """
    Calculate the MD5 content digest of a file.

    JPEG files are hashed from the start-of-scan marker onwards, so copies of
    the same image that differ only in EXIF, XMP, ICC or other metadata
    segments produce the same digest. Anything that is not a well-formed JPEG
    is hashed in full.

    Args:
        file_path: Path to an existing file

    Returns:
        MD5 digest as lowercase hexadecimal string

    Raises:
        FileNotFoundError: If the file does not exist
        IsADirectoryError: If the path is a directory
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"{file_path} not found")
    if file_path.is_dir():
        raise IsADirectoryError(f"{file_path} is a directory")

    if file_path.suffix.lower() in JPEG_EXTENSIONS:
        try:
            return _hash_jpeg_scan_data(file_path)
        except (JpegStructureError, struct.error) as e:
            logger.debug(f"Falling back to whole-file hash for {file_path}: {e}")

    return calculate_file_hash(file_path)


def calculate_file_hash(file_path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> str:
    """
    Calculate the MD5 digest of a whole file.

    Args:
        file_path: Path to file
        chunk_size: Size of chunks to read at a time

    Returns:
        MD5 digest as lowercase hexadecimal string
    """
    hasher = hashlib.md5()
    with open(file_path, 'rb') as f:
        _update_until_eof(hasher, f, chunk_size)
    return hasher.hexdigest()


def _hash_jpeg_scan_data(file_path: Path) -> str:
    """Walk the JPEG segment table and hash everything after the SOS marker."""
    file_size = os.path.getsize(file_path)
    hasher = hashlib.md5()

    with open(file_path, 'rb') as f:
        if _read_marker(f) != SOI_MARKER:
            raise JpegStructureError("missing start-of-image marker")

        while True:
            marker = _read_marker(f)
            if marker & 0xFF00 != 0xFF00:
                raise JpegStructureError(f"invalid marker 0x{marker:04X} at offset {f.tell() - 2}")

            if marker == SOS_MARKER:
                _update_until_eof(hasher, f, CHUNK_SIZE)
                return hasher.hexdigest()

            length = _read_uint16(f)
            if length < 2:
                raise JpegStructureError(f"invalid segment length {length} for marker 0x{marker:04X}")

            next_offset = f.tell() + length - 2
            if next_offset > file_size:
                raise JpegStructureError(f"segment 0x{marker:04X} runs past end of file")
            f.seek(next_offset)


def _read_marker(f: BinaryIO) -> int:
    try:
        return _read_uint16(f)
    except struct.error:
        raise JpegStructureError("no start-of-scan marker before end of file")


def _read_uint16(f: BinaryIO) -> int:
    # struct.error on a short read
    return struct.unpack('>H', f.read(2))[0]


def _update_until_eof(hasher, f: BinaryIO, chunk_size: int) -> None:
    while chunk := f.read(chunk_size):
        hasher.update(chunk)
