"""Error taxonomy for the upload pipeline.

Every error is terminal for its request. The route layer turns them into
JSON responses; only ``message`` is ever shown to the client.
"""


class IntakeError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, cause=None):
        super().__init__(self.message if cause is None else f"{self.message}: {cause}")
        self.cause = cause

    @property
    def reason(self) -> str:
        return type(self).__name__


class MethodError(IntakeError):
    status_code = 405
    message = 'Method not allowed'


class AuthError(IntakeError):
    status_code = 401
    message = 'Invalid API key'


class DecodeError(IntakeError):
    """Body over the size ceiling or not a readable multipart form."""
    status_code = 400
    message = 'File too large or invalid form'


class MissingFileError(IntakeError):
    status_code = 400
    message = 'Failed to get uploaded file'


class ExtensionError(IntakeError):
    status_code = 400
    message = 'File must be an EPUB'


class StorageCreateError(IntakeError):
    """Destination file could not be created; nothing was written."""
    status_code = 500
    message = 'Failed to save file'


class StorageWriteError(IntakeError):
    """Copy failed partway; the partial file has been removed."""
    status_code = 500
    message = 'Failed to save file'
