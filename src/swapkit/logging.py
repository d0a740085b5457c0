"""Logging utilities for the SDK.

Provides:
- Structlog JSON/console configuration
- Standardized error type constants for failed client operations
- Body truncation for logged error payloads (1KB limit)
- URL sanitization for secret query params
"""

import json as json_module
import logging
import re
import sys
from typing import Any

import structlog

# Maximum body size before truncation
MAX_BODY_SIZE = 1024


class ErrorType:
    """Standardized error type codes for structured logging.

    Categories:
    - Transport errors: the pricing API answered with an error or was unreachable
    - Local errors: validation short-circuits and unclassified failures
    - Configuration errors: the client lacks a collaborator
    """

    # Transport errors
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"

    # Local errors
    INVALID_ROUTE = "INVALID_ROUTE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


def truncate_body(body: Any, max_size: int = MAX_BODY_SIZE) -> str:
    """Truncate a response body if it exceeds max size.

    Handles string, bytes, and JSON-serializable inputs. Large bodies are
    truncated with an indicator showing how many bytes were removed.

    Args:
        body: Response body (string, bytes, dict or list)
        max_size: Maximum size in bytes (default: 1KB)

    Returns:
        Truncated body as string with indicator if truncated
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    elif not isinstance(body, str):
        body = json_module.dumps(body, default=str)

    if len(body) > max_size:
        truncated_bytes = len(body) - max_size
        return f"{body[:max_size]}... [TRUNCATED {truncated_bytes} bytes]"
    return body


def sanitize_url(url: str) -> str:
    """Remove query parameters that might contain secrets.

    Args:
        url: URL that may contain secret query params

    Returns:
        URL with token/api_key/apiKey/secret query params redacted
    """
    return re.sub(
        r"(\?|&)(token|api_key|apiKey|secret)=([^&]+)",
        r"\1\2=***",
        url,
        flags=re.IGNORECASE,
    )


def configure_logging(json_output: bool = True) -> None:
    """Configure structlog for structured logging.

    Sets up structlog with:
    - JSON output (production) or console output (development)
    - ISO timestamp format
    - Log level and stack trace formatting
    - Stdout output

    Args:
        json_output: Use JSON format (True) or console format (False)
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors = shared_processors + [structlog.processors.JSONRenderer()]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
