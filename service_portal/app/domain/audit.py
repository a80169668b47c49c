"""
Activity trail for user-facing actions.

Successful mutating requests that match a known pattern produce one
``activity`` log event. Persisting the trail is not wired up, so the event is
only logged.
"""

import re
from typing import Dict, Optional, Tuple

from fastapi import Request, Response

from shared.logging import get_logger

# (pattern, required method or None, activity type); first match wins
ACTIVITY_PATTERNS: Tuple[Tuple[re.Pattern, Optional[str], str], ...] = (
    (re.compile(r"/auth/login$", re.IGNORECASE), None, "login"),
    (re.compile(r"/auth/logout$", re.IGNORECASE), None, "logout"),
    (re.compile(r"/auth/signup$", re.IGNORECASE), None, "signup"),
    (re.compile(r"/cards/virtual$", re.IGNORECASE), "POST", "card_created"),
    (re.compile(r"/cards/[^/]+/activate$", re.IGNORECASE), "POST", "card_activated"),
    (re.compile(r"/cards/[^/]+/freeze$", re.IGNORECASE), "POST", "card_frozen"),
    (re.compile(r"/cards/[^/]+/unfreeze$", re.IGNORECASE), "POST", "card_unfrozen"),
    (re.compile(r"/cards/[^/]+/report-lost$", re.IGNORECASE), "POST", "card_reported_lost"),
    (re.compile(r"/kyc/answers$", re.IGNORECASE), "POST", "kyc_submitted"),
    (re.compile(r"/card-orders/physical$", re.IGNORECASE), "POST", "physical_card_ordered"),
    (re.compile(r"/webhooks$", re.IGNORECASE), "POST", "webhook_created"),
    (re.compile(r"/user$", re.IGNORECASE), "PATCH", "profile_updated"),
)

ACTIVITY_DETAILS: Dict[str, Dict[str, str]] = {
    "login": {"title": "Logged in", "description": "You logged into your account", "icon": "login"},
    "logout": {"title": "Logged out", "description": "You logged out of your account", "icon": "logout"},
    "signup": {"title": "Account created", "description": "Welcome! Your account has been created", "icon": "user-plus"},
    "card_created": {"title": "Virtual card created", "description": "A new virtual card has been created", "icon": "credit-card"},
    "card_activated": {"title": "Card activated", "description": "Your card has been activated", "icon": "check-circle"},
    "card_frozen": {"title": "Card frozen", "description": "Your card has been temporarily frozen", "icon": "lock"},
    "card_unfrozen": {"title": "Card unfrozen", "description": "Your card has been unfrozen", "icon": "unlock"},
    "card_reported_lost": {
        "title": "Card reported lost",
        "description": "Your card has been reported as lost and blocked",
        "icon": "alert-triangle",
    },
    "kyc_submitted": {
        "title": "KYC submitted",
        "description": "Your KYC information has been submitted for review",
        "icon": "file-text",
    },
    "physical_card_ordered": {
        "title": "Physical card ordered",
        "description": "Your physical card order has been placed",
        "icon": "package",
    },
    "webhook_created": {"title": "Webhook created", "description": "A webhook endpoint was registered", "icon": "webhook"},
    "profile_updated": {"title": "Profile updated", "description": "Your profile information has been updated", "icon": "user"},
}


def get_activity_type(method: str, path: str) -> Optional[str]:
    for pattern, required_method, activity_type in ACTIVITY_PATTERNS:
        if pattern.search(path) and (required_method is None or required_method == method.upper()):
            return activity_type
    return None


class AuditRecorder:
    """Emits an activity event for important successful requests."""

    def __init__(self):
        self.logger = get_logger("portal.audit")

    def record(self, request: Request, response: Response) -> Optional[str]:
        if response.status_code >= 400:
            return None

        activity_type = get_activity_type(request.method, request.url.path)
        if activity_type is None:
            return None

        details = ACTIVITY_DETAILS.get(
            activity_type, {"title": activity_type, "description": "", "icon": "activity"}
        )
        user = getattr(request.state, "user", None)
        self.logger.info(
            "activity",
            type=activity_type,
            title=details["title"],
            description=details["description"],
            icon=details["icon"],
            method=request.method,
            path=request.url.path,
            user_id=user.get("id") if isinstance(user, dict) else None,
            authenticated_upstream=bool(getattr(request.state, "gnosispay_token", None)),
        )
        return activity_type
