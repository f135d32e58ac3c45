"""Bounded multipart decoding of the upload body."""
import logging
from dataclasses import dataclass
from typing import BinaryIO

from flask import Request
from werkzeug.exceptions import HTTPException
from werkzeug.formparser import FormDataParser

from epub_intake.errors import DecodeError, MissingFileError

logger = logging.getLogger(__name__)


class StrictFormDataParser(FormDataParser):
    """Form parser that raises on malformed multipart bodies instead of
    returning an empty form."""

    def __init__(self, *args, **kwargs):
        kwargs['silent'] = False
        super().__init__(*args, **kwargs)


class IntakeRequest(Request):
    form_data_parser_class = StrictFormDataParser


@dataclass
class UploadedFile:
    """The file part of an upload: its byte stream and the client-declared name."""
    stream: BinaryIO
    filename: str

    def close(self):
        self.stream.close()


def extract_upload(request, field_name: str) -> UploadedFile:
    """Pull the uploaded file out of a multipart request.

    The size ceiling comes from the app's MAX_CONTENT_LENGTH, which werkzeug
    applies to the input stream while the form is parsed. With IntakeRequest
    as the request class, a malformed body fails here as well.
    """
    if request.mimetype != 'multipart/form-data':
        raise DecodeError(f"unexpected content type {request.mimetype!r}")

    try:
        files = request.files
    except (HTTPException, ValueError) as e:
        logger.info(f"Rejected upload body: {e}")
        raise DecodeError(e) from e

    file_storage = files.get(field_name)
    if file_storage is None or not file_storage.filename:
        raise MissingFileError()

    return UploadedFile(stream=file_storage.stream, filename=file_storage.filename)
