"""User-facing error messages in the storefront's two languages."""

DEFAULT_LANGUAGE = "en"

CATALOGUES: dict[str, dict[str, str]] = {
    "en": {
        "validation_error": "Please correct the highlighted fields.",
        "invalid_quantity": "The requested quantity is not available.",
        "empty_cart": "Your cart is empty.",
        "unauthenticated": "Please sign in to continue.",
        "forbidden": "You are not allowed to do that.",
        "stock_exhausted": "Some items are no longer in stock in the requested quantity.",
        "persistence_failure": "We could not save your order. Please try again.",
        "not_found": "The requested item was not found.",
    },
    "ru": {
        "validation_error": "Пожалуйста, исправьте отмеченные поля.",
        "invalid_quantity": "Запрошенное количество недоступно.",
        "empty_cart": "Ваша корзина пуста.",
        "unauthenticated": "Пожалуйста, войдите, чтобы продолжить.",
        "forbidden": "У вас нет прав на это действие.",
        "stock_exhausted": "Некоторых товаров нет в наличии в нужном количестве.",
        "persistence_failure": "Не удалось сохранить заказ. Попробуйте ещё раз.",
        "not_found": "Запрошенный объект не найден.",
    },
}


def negotiate_language(accept_language: str | None) -> str:
    """Pick the best supported language from an ``Accept-Language`` header.

    Entries are ranked by their ``q`` weight; only the primary subtag is
    considered (``ru-RU`` matches ``ru``). Falls back to English.
    """
    if not accept_language:
        return DEFAULT_LANGUAGE

    ranked = []
    for position, entry in enumerate(accept_language.split(",")):
        tag, _, params = entry.strip().partition(";")
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                weight = 0.0
        ranked.append((-weight, position, tag.split("-")[0].lower()))

    for weight, _, language in sorted(ranked):
        if weight < 0 and language in CATALOGUES:
            return language
    return DEFAULT_LANGUAGE


def translate(code: str, language: str = DEFAULT_LANGUAGE) -> str:
    catalogue = CATALOGUES.get(language, CATALOGUES[DEFAULT_LANGUAGE])
    return catalogue.get(code) or CATALOGUES[DEFAULT_LANGUAGE].get(code, code)
