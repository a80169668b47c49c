"""
Shared utilities for the Portal card API.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation and redaction
- metrics: Prometheus metrics helpers
- errors: Canonical error types and the error response body
- base_service: FastAPI app factory with middleware, health and error handlers

Do not import from service_* packages into shared/.
"""
