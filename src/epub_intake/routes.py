"""
Routes for EPUB Intake Service
Separated from app.py for better organization
"""
from flask import request
from werkzeug.exceptions import MethodNotAllowed

from shared.utils import json_response
from epub_intake.decoder import extract_upload
from epub_intake.errors import ExtensionError, IntakeError
from epub_intake.gatekeeper import authorize_upload
from epub_intake.metrics import UPLOADS_STORED, UPLOADS_REJECTED, UPLOAD_BYTES, UPLOAD_DURATION
from epub_intake.storage import destination_for, is_allowed_filename, save_stream, stored_name_for

# Every verb reaches the upload view so the gatekeeper answers 405 itself.
UPLOAD_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
HEALTH_METHODS = UPLOAD_METHODS


def init_routes(app, settings, clock):
    """Initialize routes with the immutable settings and a wall clock"""

    @app.errorhandler(IntakeError)
    def handle_intake_error(error):
        UPLOADS_REJECTED.labels(reason=error.reason).inc()
        if error.status_code >= 500:
            app.logger.error(f"Upload failed ({error.reason}): {error.cause}")
        else:
            app.logger.info(f"Upload rejected ({error.reason})")
        return json_response({'error': error.message}, error.status_code)

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(error):
        # /health answers any verb, including ones no route lists
        if request.path == '/health':
            return health_check()
        UPLOADS_REJECTED.labels(reason='MethodError').inc()
        return json_response({'error': 'Method not allowed'}, 405)

    @app.route('/health', methods=HEALTH_METHODS, provide_automatic_options=False)
    def health_check():
        """Health check endpoint"""
        return json_response({'status': 'healthy'})

    @app.route('/upload', methods=UPLOAD_METHODS, provide_automatic_options=False)
    def upload_epub():
        """
        Single-file EPUB upload.
        POST /upload?api_key=<secret> with multipart field `epub`.
        """
        with UPLOAD_DURATION.time():
            authorize_upload(request, settings)
            uploaded = extract_upload(request, settings.file_field)

            try:
                if not is_allowed_filename(uploaded.filename, settings.allowed_extension):
                    raise ExtensionError()

                stored_name = stored_name_for(uploaded.filename, clock())
                destination = destination_for(settings.upload_dir, stored_name)
                bytes_written = save_stream(uploaded.stream, destination)
            finally:
                uploaded.close()

        UPLOADS_STORED.inc()
        UPLOAD_BYTES.observe(bytes_written)
        app.logger.info(f"Successfully uploaded EPUB: {stored_name} ({bytes_written} bytes)")

        return json_response({
            'status': 'success',
            'filename': stored_name,
            'size': bytes_written
        })
