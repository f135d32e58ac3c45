"""Shared helpers for services (responses, secrets, health probing)."""

from .utils import json_response, mask_secret

__all__ = [
    'json_response',
    'mask_secret',
]
