"""
Locale resolution and message catalogues for email and SMS.
"""

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from shared.logging import get_logger

SUPPORTED_LANGUAGES = ("en", "es", "pt-PT")
DEFAULT_LANGUAGE = "en"

EMAIL_NAMESPACE = "email"
SMS_NAMESPACE = "sms"

TRANSLATIONS_DIR = Path(__file__).parent / "translations"

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

logger = get_logger("portal.i18n")


def is_supported_language(language: Optional[str]) -> bool:
    return bool(language) and language in SUPPORTED_LANGUAGES


def normalize_language(language: Optional[str]) -> str:
    """Resolve a requested locale to a supported tag.

    An exact match wins ("pt-PT"), then the base language ("es-MX" -> "es"),
    then the default ("xx" -> "en"). Empty input resolves to the default.
    """
    if not language:
        return DEFAULT_LANGUAGE

    if is_supported_language(language):
        return language

    base = language.split("-")[0]
    if is_supported_language(base):
        return base

    return DEFAULT_LANGUAGE


@lru_cache(maxsize=None)
def load_catalog(namespace: str, language: str) -> Dict[str, Any]:
    path = TRANSLATIONS_DIR / language / f"{namespace}.json"
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def interpolate(text: str, params: Dict[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders; unknown placeholders become empty."""
    return _PLACEHOLDER.sub(lambda match: str(params.get(match.group(1), "")), text)


def _lookup(catalog: Dict[str, Any], key: str) -> Optional[str]:
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


class Translator:
    """Catalogue lookups for one namespace and language, falling back to English."""

    def __init__(self, namespace: str, language: Optional[str] = None):
        self.namespace = namespace
        self.language = normalize_language(language)

    def has(self, key: str) -> bool:
        return self._resolve(key) is not None

    def _resolve(self, key: str) -> Optional[str]:
        value = _lookup(load_catalog(self.namespace, self.language), key)
        if value is None and self.language != DEFAULT_LANGUAGE:
            value = _lookup(load_catalog(self.namespace, DEFAULT_LANGUAGE), key)
        return value

    def t(self, key: str, **params: Any) -> str:
        value = self._resolve(key)
        if value is None:
            logger.warning("Missing translation", namespace=self.namespace, language=self.language, key=key)
            return key
        return interpolate(value, params)
