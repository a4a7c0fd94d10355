"""
Monitoring Module - Structured logging for conversion requests.

Usage:
    from oxy_converter.monitoring import conversion_logger

    conversion_logger.log_request(request_id, endpoint="/convert", html_bytes=len(html))
"""

from oxy_converter.monitoring.logger import (
    ConversionLogger,
    configure_logging,
    conversion_logger,
)

__all__ = [
    "ConversionLogger",
    "configure_logging",
    "conversion_logger",
]
