# === FILE: page_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера PageScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from page_scout.crawler.filters import FilterRules

DEFAULT_USER_AGENT = "PageScoutBot/1.0 (+https://github.com/page-scout/page-scout)"
DEFAULT_SITEMAP_USER_AGENT = "Mozilla/5.0 (compatible; PageScoutBot/1.0)"
MEMORY_DB = ":memory:"


class CrawlerConfig(BaseModel):
    """Конфигурация обхода одного сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_pages: int = Field(100, ge=1, description="Жесткий лимит по числу страниц.")
    parallel: int = Field(5, ge=1, description="Число одновременных запросов.")
    crawl_delay: float = Field(1.0, ge=0, description="Пауза перед каждым запросом страницы (секунд).")

    page_timeout: float = Field(30.0, gt=0, description="Таймаут загрузки страницы (секунд).")
    sitemap_timeout: float = Field(15.0, gt=0, description="Таймаут загрузки sitemap (секунд).")
    robots_timeout: float = Field(10.0, gt=0, description="Таймаут загрузки robots.txt (секунд).")
    page_max_redirects: int = Field(5, ge=0, description="Максимум редиректов для страницы.")
    sitemap_max_redirects: int = Field(3, ge=0, description="Максимум редиректов для sitemap.")

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent для страниц.")
    sitemap_user_agent: str = Field(
        DEFAULT_SITEMAP_USER_AGENT, min_length=1, description="User-Agent для sitemap и robots.txt."
    )

    use_sitemaps: bool = Field(True, description="Засевать очередь адресами из sitemap.")
    sitemap_max_urls: int = Field(1000, ge=1, description="Максимум URL из всех sitemap.")
    sitemap_max_depth: int = Field(3, ge=0, description="Глубина вложенности sitemap index.")
    max_sitemaps: int = Field(50, ge=1, description="Максимум стартовых sitemap.")
    max_sitemaps_per_level: int = Field(20, ge=1, description="Максимум sitemap на одном уровне.")
    max_urls_per_sitemap: int = Field(1000, ge=1, description="Максимум URL из одного sitemap.")

    filter_urls: bool = Field(True, description="Применять список исключений к найденным URL.")
    filter_rules: FilterRules = Field(default_factory=FilterRules, description="Список исключений.")

    db_path: str = Field("data/page_scout.db", min_length=1, description="Файл SQLite или ':memory:'.")
    cache_ttl_days: Optional[float] = Field(None, gt=0, description="Срок жизни кеша страниц (дней).")
    randomize_queue: bool = Field(True, description="Выдавать URL из очереди в случайном порядке.")

    @property
    def active_filter_rules(self) -> FilterRules:
        """Правила, которые реально применяются с учётом ``filter_urls``."""
        return self.filter_rules if self.filter_urls else FilterRules.scope_only()


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути используется configs/default.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "load_config", "ValidationError", "MEMORY_DB"]
