# File: page_scout/utils.py
"""page_scout.utils: Утилиты для канонизации URL и работы с доменами.

Нормализованный URL является ключом дедупликации во всей системе:
в очереди обхода, в кеше страниц и в множестве уже обойдённых адресов.
"""

from __future__ import annotations

import re
from typing import Collection, List, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from page_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "get_domain",
    "homepage_url",
    "is_homepage",
    "remove_duplicates",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Канонизирует URL: убирает фрагмент, сортирует параметры, срезает завершающий слеш.

    Схема и хост приводятся к нижнему регистру, порт по умолчанию удаляется,
    пустой путь превращается в ``/``. Строка, которую не удаётся разобрать как
    абсолютный URL, возвращается без изменений. Функция идемпотентна.
    """
    try:
        parts = urlsplit(url.strip())
        if not parts.scheme or not parts.netloc:
            return url
        port = parts.port
    except ValueError:
        return url

    scheme = parts.scheme.lower()
    userinfo, _, _ = parts.netloc.rpartition("@")
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    netloc = host if port is None or port == _DEFAULT_PORTS.get(scheme) else f"{host}:{port}"
    if userinfo:
        netloc = f"{userinfo}@{netloc}"

    # "/a//" would need two passes with a single-slash strip
    path = parts.path.rstrip("/") or "/"

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        pairs.sort(key=lambda kv: kv[0])
        query = urlencode(pairs)

    normalized = urlunsplit((scheme, netloc, path, query, ""))
    if normalized != url:
        logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def get_domain(url: str) -> str:
    """Возвращает hostname из URL или пустую строку, если URL не разбирается."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def homepage_url(domain: str, scheme: str = "https") -> str:
    """Главная страница домена в нормализованном виде, например ``https://a.com/``."""
    return normalize_url(f"{scheme}://{domain}")


def is_homepage(url: str, domain: str) -> bool:
    """True для ``http(s)://domain`` с необязательным завершающим слешем."""
    pattern = rf"^https?://{re.escape(domain)}/?$"
    return re.match(pattern, url, flags=re.IGNORECASE) is not None


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
