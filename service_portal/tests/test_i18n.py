"""
Unit tests for language resolution and catalogues.
"""

import pytest

from service_portal.app.notifications.i18n import (
    EMAIL_NAMESPACE,
    SMS_NAMESPACE,
    Translator,
    interpolate,
    normalize_language,
)


class TestNormalizeLanguage:
    """Test cases for normalize_language."""

    @pytest.mark.parametrize(
        "requested, expected",
        [
            ("pt-PT", "pt-PT"),
            ("es", "es"),
            ("en", "en"),
            ("es-MX", "es"),
            ("xx", "en"),
            ("", "en"),
            (None, "en"),
        ],
    )
    def test_resolution(self, requested, expected):
        assert normalize_language(requested) == expected


class TestTranslator:
    """Test cases for Translator."""

    def test_interpolates_placeholders(self):
        translator = Translator(EMAIL_NAMESPACE, "en")
        assert translator.t("welcome.body.intro", name="Daniel").startswith("Hi Daniel,")

    def test_localized_text(self):
        translator = Translator(EMAIL_NAMESPACE, "es")
        assert translator.t("welcome.subject") == "Bienvenido a Portalfi"

    def test_missing_key_returns_key(self):
        translator = Translator(SMS_NAMESPACE, "pt-PT")
        assert translator.t("otp.unknown") == "otp.unknown"
        assert translator.has("otp.unknown") is False

    def test_unknown_placeholder_becomes_empty(self):
        assert interpolate("Hi {{ name }}{{missing}}!", {"name": "Ana"}) == "Hi Ana!"

    def test_every_language_has_every_otp_purpose(self):
        for language in ("en", "es", "pt-PT"):
            translator = Translator(SMS_NAMESPACE, language)
            for purpose in ("generic", "login", "registration", "password_reset"):
                message = translator.t(f"otp.{purpose}", appName="Portalfi", code="123456", minutes=10)
                assert "123456" in message
                assert "{{" not in message
