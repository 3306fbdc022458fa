"""Message catalogs for user-facing text.

Every error code and success message is a catalog key. Catalogs live under
``locales/<lang>/LC_MESSAGES/messages``; a compiled ``.mo`` is preferred and
the ``.po`` source is read as well, so an uncompiled checkout still
translates. Lookups degrade from the requested language to
``DEFAULT_LANGUAGE`` and finally to the key itself.
"""

import gettext
from pathlib import Path
from typing import Dict, Iterator, Tuple

from fastapi import Request

from src.core.config.settings import settings
from src.core.logging import logger

LOCALES_DIR = Path(__file__).resolve().parents[2] / "locales"
DOMAIN = "messages"

_compiled: Dict[str, gettext.NullTranslations] = {}
_sources: Dict[str, Dict[str, str]] = {}


def _po_entries(path: Path) -> Iterator[Tuple[str, str]]:
    """Yields ``(msgid, msgstr)`` pairs from single-line .po entries."""
    msgid = None
    for line in path.read_text(encoding="utf-8").splitlines():
        keyword, _, value = line.strip().partition(" ")
        value = value.strip().strip('"')
        if keyword == "msgid":
            msgid = value
        elif keyword == "msgstr" and msgid:
            yield msgid, value or msgid
            msgid = None


def setup_i18n() -> None:
    """(Re)loads the catalogs of every supported language.

    Raises:
        FileNotFoundError: If the locales directory is missing.
    """
    if not LOCALES_DIR.is_dir():
        raise FileNotFoundError(f"Locales directory not found: {LOCALES_DIR}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _compiled[lang] = gettext.translation(DOMAIN, localedir=str(LOCALES_DIR), languages=[lang], fallback=True)

        source = LOCALES_DIR / lang / "LC_MESSAGES" / f"{DOMAIN}.po"
        try:
            _sources[lang] = dict(_po_entries(source)) if source.exists() else {}
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("i18n_catalog_unreadable", lang=lang, error=str(exc))
            _sources[lang] = {}

    logger.debug("i18n_loaded", languages=sorted(_compiled), default=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """Returns the text for ``key`` in ``locale``, or ``key`` when no catalog has it."""
    if not _compiled:
        setup_i18n()

    lang = locale if locale in _compiled else settings.DEFAULT_LANGUAGE
    translations = _compiled.get(lang)
    if translations is None:
        return key

    text = translations.gettext(key)
    if text != key:
        return text

    text = _sources.get(lang, {}).get(key, key)
    if text == key:
        logger.warning("translation_key_not_found", key=key, locale=lang)
    return text


def get_request_language(request: Request) -> str:
    """Chooses the response language for ``request``.

    An explicit ``?lang=`` wins, then the first supported tag of
    ``Accept-Language`` (region subtags ignored), then ``DEFAULT_LANGUAGE``.
    """
    supported = settings.SUPPORTED_LANGUAGES
    explicit = request.query_params.get("lang")
    if explicit in supported:
        return explicit

    header = request.headers.get("Accept-Language") or ""
    for entry in header.split(","):
        primary = entry.split(";", 1)[0].strip().split("-", 1)[0].lower()
        if primary in supported:
            return primary
    return settings.DEFAULT_LANGUAGE
