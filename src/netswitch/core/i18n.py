"""Translations for user-visible strings, loaded from ``<languages_dir>/<locale>/LC_MESSAGES``."""
from __future__ import annotations

import gettext
import logging

logger = logging.getLogger(__name__)


class Translator:
    def __init__(
        self,
        text_domain: str,
        languages_dir: str | None = None,
        locale: str = "en_US",
    ) -> None:
        self.text_domain = text_domain
        self.locale = locale
        self._catalog = gettext.translation(
            text_domain,
            localedir=languages_dir,
            languages=[locale],
            fallback=True,
        )
        if type(self._catalog) is gettext.NullTranslations:
            logger.debug("No '%s' catalog for locale %s", text_domain, locale)

    def gettext(self, message: str) -> str:
        return self._catalog.gettext(message)

    def ngettext(self, singular: str, plural: str, n: int) -> str:
        return self._catalog.ngettext(singular, plural, n)
