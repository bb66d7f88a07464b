import re
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel

from ..config import settings
from ..core.models import Dimension, Polarity
from ..core.errors import TemplateCatalogError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class ScenarioTemplate(BaseModel):
    """Left/right fallback text for one (dimension, polarity) pair, with a {context} slot"""
    left: str
    right: str

    def render(self, context: str) -> Tuple[str, str]:
        return interpolate(self.left, context=context), interpolate(self.right, context=context)


FallbackTable = Dict[Tuple[Dimension, Polarity], ScenarioTemplate]


def interpolate(template: str, **params: str) -> str:
    """Replace {name} placeholders that have a matching parameter, leave others untouched"""
    return _PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), template)


class MessageCatalog:
    """Locale string lookup backed by one JSON file per locale"""

    def __init__(self, messages_dir: str, default_locale: str = "en"):
        self.messages_dir = Path(messages_dir)
        self.messages: Dict[str, Dict[str, Any]] = {}
        self._fallback_tables: Dict[str, FallbackTable] = {}

        self._load_messages()

        if default_locale not in self.messages:
            raise TemplateCatalogError(
                f"Default locale '{default_locale}' not found in {self.messages_dir}"
            )
        self.default_locale = default_locale

        # Fail at startup rather than on the first request that needs a template
        for locale in self.messages:
            self._fallback_tables[locale] = self._build_fallback_table(locale)

        logger.info(f"Message catalog loaded: locales={self.supported_locales()}")

    def _load_messages(self):
        """Load every <locale>.json file from the messages directory"""
        try:
            for path in sorted(self.messages_dir.glob("*.json")):
                with open(path, 'r', encoding='utf-8') as f:
                    self.messages[path.stem] = json.load(f)
        except Exception as e:
            logger.error(f"Failed to load messages: {e}")
            raise TemplateCatalogError(f"Message loading failed: {e}")

    def supported_locales(self) -> List[str]:
        return list(self.messages.keys())

    def is_locale_supported(self, locale: str) -> bool:
        return locale in self.messages

    def resolve_locale(self, locale: str = None) -> str:
        """Return the locale itself when supported, the default locale otherwise"""
        if locale and self.is_locale_supported(locale):
            return locale
        if locale:
            logger.debug(f"Unsupported locale '{locale}', using '{self.default_locale}'")
        return self.default_locale

    def lookup(self, locale: str, path: str) -> Any:
        value: Any = self.messages[self.resolve_locale(locale)]
        for key in path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return None
            value = value[key]
        return value

    def translate(self, locale: str, path: str, **params: str) -> str:
        """
        Look up a dot-notation path and interpolate {name} parameters

        Args:
            locale: Locale code, unsupported codes use the default locale
            path: Dot path, e.g. "scenarios.ageDescriptions.teen"
            params: Values for {name} placeholders

        Returns:
            The translated string, or the path itself when it is missing
        """
        value = self.lookup(locale, path)
        if value is None:
            logger.warning(f"Translation missing: {path} for locale: {locale}")
            return path
        if isinstance(value, str) and params:
            return interpolate(value, **params)
        return value

    def _build_fallback_table(self, locale: str) -> FallbackTable:
        table: FallbackTable = {}
        missing = []
        for dimension in Dimension:
            for polarity in Polarity:
                entry = self.lookup(locale, f"scenarios.fallback.{dimension.value}.{polarity.value}")
                if not isinstance(entry, dict) or not entry.get("left") or not entry.get("right"):
                    missing.append(f"{dimension.value}.{polarity.value}")
                    continue
                table[(dimension, polarity)] = ScenarioTemplate(left=entry["left"], right=entry["right"])
        if missing:
            raise TemplateCatalogError(
                f"Locale '{locale}' is missing fallback templates: {', '.join(missing)}"
            )
        return table

    def fallback_templates(self, locale: str = None) -> FallbackTable:
        return self._fallback_tables[self.resolve_locale(locale)]


@lru_cache(maxsize=1)
def get_catalog() -> MessageCatalog:
    """Shared catalog built from application settings"""
    return MessageCatalog(settings.MESSAGES_DIR, settings.DEFAULT_LOCALE)
