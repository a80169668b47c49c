"""
Unit tests for the activity trail.
"""

import pytest

from service_portal.app.domain.audit import get_activity_type


class TestActivityType:
    """Test cases for get_activity_type."""

    @pytest.mark.parametrize(
        "method, path, expected",
        [
            ("POST", "/auth/login", "login"),
            ("POST", "/api/v1/auth/signup", "signup"),
            ("POST", "/api/v1/cards/card-1/freeze", "card_frozen"),
            ("POST", "/api/v1/cards/card-1/unfreeze", "card_unfrozen"),
            ("POST", "/api/v1/cards/card-1/report-lost", "card_reported_lost"),
            ("POST", "/api/v1/kyc/answers", "kyc_submitted"),
            ("POST", "/api/v1/card-orders/physical", "physical_card_ordered"),
            ("POST", "/api/v1/webhooks", "webhook_created"),
            ("PATCH", "/api/v1/user", "profile_updated"),
            ("GET", "/api/v1/user", None),
            ("GET", "/api/v1/cards/card-1/freeze", None),
            ("GET", "/health", None),
        ],
    )
    def test_patterns(self, method, path, expected):
        assert get_activity_type(method, path) == expected
