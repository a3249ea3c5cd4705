# products/localization.py

from __future__ import annotations

from django.conf import settings


def supported_locales() -> tuple[str, ...]:
    return tuple(getattr(settings, "STOREFRONT_LOCALES", ("en", "id")))


def default_locale() -> str:
    return getattr(settings, "STOREFRONT_DEFAULT_LOCALE", "en")


def normalize_locale(value) -> str:
    """
    Map a raw locale hint ("id", "ID", "id-ID", "en_US") onto a supported locale.
    Unknown values fall back to the default locale.
    """
    raw = str(value or "").strip().lower().replace("_", "-")
    base = raw.split("-", 1)[0]
    return base if base in supported_locales() else default_locale()


def resolve_locale(request) -> str:
    """
    Locale precedence:
    1) ?locale= query parameter
    2) first Accept-Language entry
    3) default locale
    """
    if request is None:
        return default_locale()

    params = getattr(request, "query_params", None) or getattr(request, "GET", {})
    explicit = (params.get("locale") or "").strip()
    if explicit:
        return normalize_locale(explicit)

    header = (request.META.get("HTTP_ACCEPT_LANGUAGE") or "").strip()
    if header:
        return normalize_locale(header.split(",", 1)[0].split(";", 1)[0])

    return default_locale()
