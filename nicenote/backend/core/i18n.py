"""
API Message Localization.

Error bodies carry a single display string. The string is chosen from the
request's Accept-Language header; unknown locales fall back to English.
"""

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "RES_NOT_FOUND": "Not found",
        "RES_CONFLICT": "Resource conflict",
        "VAL_VALIDATION_ERROR": "Invalid request",
        "VAL_REQUEST_INVALID": "Invalid request",
        "SYS_DATABASE_ERROR": "Service temporarily unavailable",
        "SYS_INTERNAL_ERROR": "Internal Server Error",
    },
    "zh": {
        "RES_NOT_FOUND": "未找到",
        "RES_CONFLICT": "资源冲突",
        "VAL_VALIDATION_ERROR": "请求无效",
        "VAL_REQUEST_INVALID": "请求无效",
        "SYS_DATABASE_ERROR": "服务暂时不可用",
        "SYS_INTERNAL_ERROR": "服务器内部错误",
    },
}


def resolve_locale(accept_language: str | None) -> str:
    """Pick a supported locale from the first Accept-Language entry."""
    if not accept_language:
        return DEFAULT_LOCALE
    primary = accept_language.split(",")[0].split(";")[0].strip().lower()
    if primary.startswith("zh"):
        return "zh"
    return DEFAULT_LOCALE


def translate(code: str, locale: str) -> str:
    """Translate an error code, falling back to English then the code itself."""
    messages = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    return messages.get(code) or MESSAGES[DEFAULT_LOCALE].get(code, code)
