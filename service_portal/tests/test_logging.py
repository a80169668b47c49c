"""
Unit tests for request ids and log redaction.
"""

import re

from shared.logging import REDACTED, generate_request_id, sanitize_body, sanitize_headers


class TestLoggingHelpers:
    """Test cases for the shared logging helpers."""

    def test_request_id_format(self):
        assert re.fullmatch(r"req_\d{13}_[a-z0-9]{9}", generate_request_id())

    def test_sensitive_body_fields_are_redacted(self):
        body = {"email": "user@example.com", "password": "secret123", "signature": "0xsig"}

        sanitized = sanitize_body(body)

        assert sanitized == {"email": "user@example.com", "password": REDACTED, "signature": REDACTED}
        assert body["password"] == "secret123"

    def test_non_mapping_body(self):
        assert sanitize_body(["a", "b"]) == {}
        assert sanitize_body(None) == {}

    def test_credential_headers_are_redacted(self):
        sanitized = sanitize_headers({"Authorization": "Bearer abc", "X-Request-ID": "req-1"})
        assert sanitized == {"authorization": REDACTED, "x-request-id": "req-1"}
