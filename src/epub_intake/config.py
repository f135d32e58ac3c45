"""
Configuration for EPUB Intake Service
"""
import os
from dataclasses import dataclass
from typing import Optional


class ConfigError(Exception):
    """Raised when the service cannot start with the given environment."""


class Config:
    PORT = 8080
    UPLOAD_DIR = '/app/uploads'
    MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50MB
    ALLOWED_EXTENSION = '.epub'
    FILE_FIELD = 'epub'
    API_KEY_PARAM = 'api_key'

    LOG_LEVEL = 'INFO'

    METRICS_ENABLED = False
    METRICS_PORT = 9102


@dataclass(frozen=True)
class IntakeSettings:
    """Immutable process-wide settings handed to the request handlers."""
    api_key: str
    upload_dir: str = Config.UPLOAD_DIR
    max_upload_size: int = Config.MAX_UPLOAD_SIZE
    allowed_extension: str = Config.ALLOWED_EXTENSION
    file_field: str = Config.FILE_FIELD
    api_key_param: str = Config.API_KEY_PARAM
    port: int = Config.PORT
    log_level: str = Config.LOG_LEVEL
    log_file: Optional[str] = None
    metrics_enabled: bool = Config.METRICS_ENABLED
    metrics_port: int = Config.METRICS_PORT

    @classmethod
    def from_env(cls, environ=None) -> 'IntakeSettings':
        """Read settings once from the environment.

        A missing or empty ``API_KEY`` is fatal; numeric values that do not
        parse are reported as ``ConfigError`` as well.
        """
        env = os.environ if environ is None else environ

        api_key = env.get('API_KEY', '')
        if not api_key:
            raise ConfigError('API_KEY environment variable is required')

        try:
            port = int(env.get('PORT') or Config.PORT)
            max_upload_size = int(env.get('MAX_UPLOAD_SIZE') or Config.MAX_UPLOAD_SIZE)
            metrics_port = int(env.get('METRICS_PORT') or Config.METRICS_PORT)
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        if max_upload_size <= 0:
            raise ConfigError('MAX_UPLOAD_SIZE must be positive')

        return cls(
            api_key=api_key,
            upload_dir=env.get('UPLOAD_DIR') or Config.UPLOAD_DIR,
            max_upload_size=max_upload_size,
            port=port,
            log_level=env.get('LOG_LEVEL') or Config.LOG_LEVEL,
            log_file=env.get('LOG_FILE') or None,
            metrics_enabled=env.get('METRICS_ENABLED', 'false').lower() == 'true',
            metrics_port=metrics_port,
        )
