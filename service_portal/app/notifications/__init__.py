"""
Notifications package for the Portal service.

- i18n: language resolution and the email/SMS message catalogues.
- templates: the transactional email layout and template registry.
- service: NotificationService, which renders messages and hands them to the
  SMS and SMTP adapters.
"""

from .i18n import normalize_language, Translator
from .service import NotificationService, OtpPurpose

__all__ = [
    "normalize_language",
    "Translator",
    "NotificationService",
    "OtpPurpose",
]
