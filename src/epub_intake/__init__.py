"""EPUB intake service package.

This package intentionally avoids building the Flask app at import time so
importing the pipeline pieces (storage, gatekeeper) has no side effects.
Use `epub_intake.app.create_app` where the Flask app is required.
"""

__all__ = []
