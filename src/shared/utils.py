"""Utility helpers shared across services."""

from flask import jsonify

def json_response(payload: dict, status: int = 200):
    """Return a JSON response with given status."""
    return jsonify(payload), status

def mask_secret(secret: str) -> str:
    """Show only the first and last four characters of a secret."""
    if len(secret) <= 8:
        return '****'
    return secret[:4] + '*' * (len(secret) - 8) + secret[-4:]
