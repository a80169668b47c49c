"""
Shared logging configuration for the Portal card API.
"""

import sys
import structlog
import logging
import random
import string
import time
from typing import Any, Dict, Mapping, Optional
from contextvars import ContextVar

# Context variables for correlation IDs
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

REDACTED = "***REDACTED***"
SENSITIVE_FIELDS = ("password", "token", "apiKey", "secret", "privateKey", "signature")
SENSITIVE_HEADERS = ("authorization", "cookie", "x-api-key")


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id

    user_id = user_id_var.get()
    if user_id:
        event_dict["user_id"] = user_id

    return event_dict


def generate_request_id() -> str:
    """Build a request id of the form req_<epoch ms>_<9 random chars>."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set request ID in context."""
    if request_id is None:
        request_id = generate_request_id()
    request_id_var.set(request_id)
    return request_id


def set_user_context(user_id: Optional[str] = None):
    """Set user context in logging."""
    if user_id:
        user_id_var.set(user_id)


def sanitize_body(body: Any) -> Dict[str, Any]:
    """Return a shallow copy of a request body with secrets redacted."""
    if not isinstance(body, Mapping):
        return {}
    sanitized = dict(body)
    for field in SENSITIVE_FIELDS:
        if sanitized.get(field):
            sanitized[field] = REDACTED
    return sanitized


def sanitize_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Return request headers with credentials redacted."""
    if not headers:
        return {}
    sanitized = {key.lower(): value for key, value in headers.items()}
    for header in SENSITIVE_HEADERS:
        if sanitized.get(header):
            sanitized[header] = REDACTED
    return sanitized


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
