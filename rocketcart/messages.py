"""User-facing message catalog."""

from rocketcart import config

SUPPORTED_LANGUAGES = {
    "pt": "Português",
    "en": "English",
}

DEFAULT_LANGUAGE = "en"

MSG_ADD_FAILED = "add_failed"
MSG_OUT_OF_STOCK = "out_of_stock"
MSG_REMOVE_FAILED = "remove_failed"
MSG_UPDATE_FAILED = "update_failed"

_MESSAGES: dict[str, dict[str, str]] = {
    "pt": {
        MSG_ADD_FAILED: "Erro na adição do produto",
        MSG_OUT_OF_STOCK: "Quantidade solicitada fora de estoque",
        MSG_REMOVE_FAILED: "Erro na remoção do produto",
        MSG_UPDATE_FAILED: "Erro na alteração de quantidade do produto",
    },
    "en": {
        MSG_ADD_FAILED: "Could not add product",
        MSG_OUT_OF_STOCK: "Requested quantity exceeds stock",
        MSG_REMOVE_FAILED: "Could not remove product",
        MSG_UPDATE_FAILED: "Could not change product quantity",
    },
}


def detect_language(language_code: str | None) -> str:
    """Normalize a language code ("pt-BR" -> "pt"); unknown -> default."""
    if not language_code:
        return DEFAULT_LANGUAGE
    lang = language_code.split("-")[0].split("_")[0].lower()
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def get_message(key: str, lang: str | None = None) -> str:
    """
    Get a user-facing message.

    Args:
        key: Message id (MSG_* constant)
        lang: Language code; defaults to ROCKETCART_LANGUAGE

    Returns:
        Localized text, English text, or the key itself as last resort
    """
    lang = detect_language(lang or config.LANGUAGE)
    text = _MESSAGES[lang].get(key)
    if text is None:
        text = _MESSAGES[DEFAULT_LANGUAGE].get(key, key)
    return text
