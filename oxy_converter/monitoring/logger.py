"""
Conversion Logger - Structured logging for conversion requests.

Each HTTP conversion produces JSON log lines that can be traced by
request ID:
- conversion_request: input size and options
- conversion_result: success, element counts, latency
- conversion_error: unexpected failures

Log Format:
==========
[2025-01-01 12:00:00] INFO [oxy_converter.api] Conversion Result: {"event": ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from oxy_converter.converter import ConversionResult

# Configure the API logger
logger = logging.getLogger("oxy_converter.api")
logger.setLevel(logging.INFO)

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_logging(level: str) -> None:
    """Set the level of all oxy_converter loggers (core modules included)."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.getLogger("oxy_converter").setLevel(resolved)
    logger.setLevel(resolved)


class ConversionLogger:
    """
    Structured logger for conversion requests.

    Usage:
        conversion_logger.log_request(request_id, endpoint="/convert", html_bytes=1024)
        conversion_logger.log_result(request_id, result, latency_ms=12.5)
    """

    def __init__(self):
        """Initialize the conversion logger."""
        self._logger = logger

    def log_request(
        self,
        request_id: str,
        endpoint: str,
        html_bytes: int,
        items: int = 1,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an incoming conversion request.

        Args:
            request_id: Unique request identifier
            endpoint: Route path
            html_bytes: Size of the HTML input (sum for batches)
            items: Number of inputs (batches only)
            options: Conversion options as sent
        """
        log_data = {
            "event": "conversion_request",
            "request_id": request_id,
            "endpoint": endpoint,
            "html_bytes": html_bytes,
            "items": items,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if options:
            log_data["options"] = options

        self._logger.info(f"Conversion Request: {json.dumps(log_data)}")

    def log_result(
        self,
        request_id: str,
        result: ConversionResult,
        latency_ms: float = 0.0,
    ) -> None:
        """
        Log the outcome of one conversion.

        Failed conversions (bad input) are logged at WARNING level.
        """
        log_data = {
            "event": "conversion_result",
            "request_id": request_id,
            "success": result.success,
            "latency_ms": round(latency_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if result.success:
            log_data["elements"] = result.stats.elements
            log_data["warnings"] = len(result.stats.warnings)
            log_data["custom_classes"] = len(result.custom_classes)
        else:
            log_data["error"] = result.error

        level = logging.INFO if result.success else logging.WARNING
        self._logger.log(level, f"Conversion Result: {json.dumps(log_data)}")

    def log_error(self, request_id: str, error: Exception) -> None:
        """Log an unexpected failure."""
        log_data = {
            "event": "conversion_error",
            "request_id": request_id,
            "error_type": type(error).__name__,
            "error": str(error),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        self._logger.error(f"Conversion Error: {json.dumps(log_data)}")


# Singleton instance
conversion_logger = ConversionLogger()
