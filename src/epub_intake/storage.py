"""
Validation and persistence of uploaded EPUB files.

Stored files live flat under the upload directory, named
``<YYYYMMDD_HHMMSS>_<original basename>``. There is no index; the directory
listing is the inventory.
"""
import os
import logging
from datetime import datetime
from typing import BinaryIO

from epub_intake.errors import StorageCreateError, StorageWriteError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'
COPY_CHUNK_SIZE = 64 * 1024


def is_allowed_filename(filename: str, extension: str = '.epub') -> bool:
    """Check the declared name ends with the allowed extension, ignoring case."""
    return bool(filename) and filename.lower().endswith(extension.lower())


def client_basename(filename: str) -> str:
    """Strip any directory part from a client-supplied name (either separator)."""
    return filename.replace('\\', '/').rsplit('/', 1)[-1]


def stored_name_for(filename: str, now: datetime) -> str:
    return f"{now.strftime(TIMESTAMP_FORMAT)}_{client_basename(filename)}"


def destination_for(upload_dir: str, stored_name: str) -> str:
    """Join a stored name to the upload root, refusing anything outside it."""
    root = os.path.abspath(upload_dir)
    destination = os.path.abspath(os.path.join(root, stored_name))
    if os.path.dirname(destination) != root:
        raise StorageCreateError(f"destination {destination} escapes {root}")
    return destination


def _copy_stream(source: BinaryIO, target: BinaryIO) -> int:
    written = 0
    for block in iter(lambda: source.read(COPY_CHUNK_SIZE), b''):
        target.write(block)
        written += len(block)
    return written


def _remove_partial(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.warning(f"Failed to remove partial file {path}: {e}")


def save_stream(source: BinaryIO, destination: str) -> int:
    """Write ``source`` to a new file at ``destination``; return bytes written.

    A file that fails mid-copy is deleted before StorageWriteError is raised.
    An existing file at the same path is overwritten.
    """
    try:
        target = open(destination, 'wb')
    except (OSError, ValueError) as e:
        logger.error(f"Failed to create destination file: {e}")
        raise StorageCreateError(e) from e

    try:
        with target:
            return _copy_stream(source, target)
    except Exception as e:
        logger.error(f"Failed to copy file: {e}")
        _remove_partial(destination)
        raise StorageWriteError(e) from e
