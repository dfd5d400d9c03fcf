"""
Translation of medicine records for the public view page.

Only the free-text fields are sent to the API; dates, price, batch number
and company name are shown as written.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from infomed.api_client import APIClient, APIError, unwrap
from infomed.core.logging import get_logger
from infomed.schemas import InfoRecord, Language

logger = get_logger(__name__)

ORIGINAL_LANGUAGE = "en"
ORIGINAL_LABEL = "English (Original)"

TRANSLATABLE_FIELDS = ("medicine_name", "usage", "dosage", "drugs", "instr")


class TranslationError(Exception):
    """The record could not be translated; the original should be shown."""


def load_languages(api: APIClient) -> list[Language]:
    """Fetch the available target languages. Failures yield an empty list."""
    try:
        payload = unwrap(api.translation.languages())
        return [Language.model_validate(item) for item in payload.get("languages", [])]
    except (APIError, PydanticValidationError) as e:
        logger.error(f"Failed to fetch languages: {e}")
        return []


def language_options(languages: list[Language]) -> list[tuple[str, str]]:
    """(code, label) pairs for the language selector, original language first."""
    options = [(ORIGINAL_LANGUAGE, ORIGINAL_LABEL)]
    options.extend(
        (language.code, language.name)
        for language in languages
        if language.code != ORIGINAL_LANGUAGE
    )
    return options


def language_name(languages: list[Language], code: str) -> str:
    for language in languages:
        if language.code == code:
            return language.name
    return "English" if code == ORIGINAL_LANGUAGE else code


def translate_record(api: APIClient, record: InfoRecord, target_lang: str) -> Optional[InfoRecord]:
    """
    Translate the free-text fields of ``record`` into ``target_lang``.

    Returns:
        A translated copy, or None when the original language is requested

    Raises:
        TranslationError: Nothing to translate, the call failed or the
            response carried no translations
    """
    if target_lang == ORIGINAL_LANGUAGE:
        return None

    fields = [name for name in TRANSLATABLE_FIELDS if getattr(record, name).strip()]
    if not fields:
        raise TranslationError("No content available for translation.")

    texts = [getattr(record, name) for name in fields]
    try:
        payload = unwrap(api.translation.translate_batch(texts, target_lang))
    except APIError as e:
        raise TranslationError(e.message) from e

    translated = payload.get("translatedTexts")
    if not isinstance(translated, list):
        raise TranslationError("Invalid translation response")

    updates = {}
    for name, text in zip(fields, translated):
        if text:
            updates[name] = text
    logger.debug(f"Translated {len(updates)} field(s) to {target_lang}")
    return record.model_copy(update=updates)
