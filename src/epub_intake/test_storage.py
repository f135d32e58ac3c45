import io
import os
from datetime import datetime

import pytest

from epub_intake import storage
from epub_intake.errors import StorageCreateError, StorageWriteError
from epub_intake.storage import (
    client_basename,
    destination_for,
    is_allowed_filename,
    save_stream,
    stored_name_for,
)


class FailingStream:
    """Yields ``good_bytes`` bytes, then fails like a dropped connection."""

    def __init__(self, good_bytes):
        self.remaining = good_bytes

    def read(self, size=-1):
        if self.remaining <= 0:
            raise ConnectionResetError('client went away')
        chunk = min(size, self.remaining) if size and size > 0 else self.remaining
        self.remaining -= chunk
        return b'a' * chunk


@pytest.mark.parametrize('filename, allowed', [
    ('book.epub', True),
    ('BOOK.EPUB', True),
    ('my.book.Epub', True),
    ('.epub', True),
    ('book.pdf', False),
    ('book.epub ', False),
    ('book.epub/', False),
    ('', False),
])
def test_is_allowed_filename(filename, allowed):
    assert is_allowed_filename(filename) is allowed


@pytest.mark.parametrize('filename, expected', [
    ('book.epub', 'book.epub'),
    ('dir/book.epub', 'book.epub'),
    ('../../etc/passwd.epub', 'passwd.epub'),
    ('C:\\Users\\me\\book.epub', 'book.epub'),
    ('/abs/path/book.epub', 'book.epub'),
])
def test_client_basename(filename, expected):
    assert client_basename(filename) == expected


def test_stored_name_format():
    now = datetime(2024, 1, 2, 3, 4, 5)

    assert stored_name_for('sub/My Book.epub', now) == '20240102_030405_My Book.epub'


def test_destination_is_inside_root(tmp_path):
    destination = destination_for(str(tmp_path), '20240102_030405_book.epub')

    assert os.path.dirname(destination) == str(tmp_path)


@pytest.mark.parametrize('stored_name', ['..', '../escape.epub', 'a/b.epub'])
def test_destination_outside_root_is_refused(tmp_path, stored_name):
    with pytest.raises(StorageCreateError):
        destination_for(str(tmp_path), stored_name)


def test_save_stream_copies_everything(tmp_path):
    content = os.urandom(3 * storage.COPY_CHUNK_SIZE + 17)
    destination = str(tmp_path / 'out.epub')

    written = save_stream(io.BytesIO(content), destination)

    assert written == len(content)
    with open(destination, 'rb') as f:
        assert f.read() == content


def test_save_stream_create_failure(tmp_path):
    destination = str(tmp_path / 'missing' / 'out.epub')

    with pytest.raises(StorageCreateError):
        save_stream(io.BytesIO(b'data'), destination)

    assert not os.path.exists(destination)


def test_save_stream_removes_partial_file(tmp_path):
    destination = str(tmp_path / 'out.epub')

    with pytest.raises(StorageWriteError) as excinfo:
        save_stream(FailingStream(2 * storage.COPY_CHUNK_SIZE), destination)

    assert isinstance(excinfo.value.cause, ConnectionResetError)
    assert not os.path.exists(destination)
    assert os.listdir(tmp_path) == []


def test_save_stream_ignores_cleanup_failure(tmp_path, monkeypatch):
    destination = str(tmp_path / 'out.epub')

    def failing_remove(path):
        raise PermissionError('read-only filesystem')

    monkeypatch.setattr(storage.os, 'remove', failing_remove)

    with pytest.raises(StorageWriteError):
        save_stream(FailingStream(10), destination)
