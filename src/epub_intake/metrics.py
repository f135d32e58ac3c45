"""Prometheus metrics for the intake pipeline."""
import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

UPLOADS_STORED = Counter('epub_intake_uploads_total', 'Total EPUB uploads stored')
UPLOADS_REJECTED = Counter(
    'epub_intake_rejected_total', 'Total uploads rejected or failed', ['reason']
)
UPLOAD_BYTES = Histogram(
    'epub_intake_upload_bytes',
    'Size of stored uploads in bytes',
    buckets=(64 * 1024, 256 * 1024, 1024 * 1024, 4 * 1024 * 1024,
             16 * 1024 * 1024, 50 * 1024 * 1024),
)
UPLOAD_DURATION = Histogram(
    'epub_intake_upload_duration_seconds', 'Time spent handling an upload request'
)


def start_metrics_server(port: int) -> None:
    start_http_server(port)
    logger.info(f"Metrics server listening on port {port}")
