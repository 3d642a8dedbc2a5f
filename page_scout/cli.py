# === FILE: page_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера PageScout через командную строку.

Команды:
  crawl     Обойти сайт(ы) и вывести/сохранить сводку по страницам
  discover  Найти URL сайта по sitemap без загрузки страниц
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --url URL           Обойти один сайт
  --input PATH        CSV со столбцами name,url
  --companies INT     Сколько сайтов из CSV обработать (0 — все)
  --runs INT          Число прогонов на сайт
  --parallel INT      Число одновременных запросов
  --max-pages INT     Лимит страниц на домен
  --filter-urls / --no-filter-urls  Применять список исключений URL
  --crawl-delay SEC   Пауза перед каждым запросом
  --db PATH           Файл SQLite (':memory:' — без сохранения)
  --no-sitemaps       Не засевать очередь из sitemap
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут одного обхода (секунд)

Пример:
  page-scout crawl --url https://example.com --max-pages 20 --parallel 3 --pretty
"""
import asyncio
import csv
import json
import sys
from pathlib import Path
from typing import List, Tuple

import click
from pydantic import ValidationError

from page_scout import __version__
from page_scout.aggregator import CrawlReport, aggregate_results
from page_scout.config import CrawlerConfig, load_config
from page_scout.logger import init_logging, logger
from page_scout.report.json_report import render_json
from page_scout.scanner import start_crawl, start_discovery

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def load_companies(path: Path) -> List[Tuple[str, str]]:
    """Читает CSV с сайтами: столбцы name/url (или Start-up/URL)."""
    companies: List[Tuple[str, str]] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            name = (row.get("name") or row.get("Start-up") or "").strip()
            url = (row.get("url") or row.get("URL") or "").strip()
            if name and url:
                companies.append((name, url))
    logger.info("Loaded %d companies from %s", len(companies), path)
    return companies


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд PageScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _apply_overrides(cfg: CrawlerConfig, **overrides) -> CrawlerConfig:
    values = {k: v for k, v in overrides.items() if v is not None}
    if not values:
        return cfg
    try:
        return CrawlerConfig(**{**cfg.model_dump(), **values})
    except ValidationError as e:
        print_error(f'Неверные параметры: {e}')


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--url', 'url', default=None, help='Обойти один сайт вместо CSV')
@click.option(
    '--input', '-i', 'input_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='CSV со столбцами name,url'
)
@click.option('--companies', type=int, default=0, show_default=True,
              help='Сколько сайтов из CSV обработать (0 — все)')
@click.option('--runs', type=click.IntRange(min=1), default=1, show_default=True,
              help='Число прогонов на сайт')
@click.option('--parallel', type=click.IntRange(min=1), default=None, help='Число одновременных запросов')
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Лимит страниц на домен')
@click.option('--filter-urls/--no-filter-urls', 'filter_urls', default=None,
              help='Применять список исключений к найденным URL (по умолчанию из конфигурации)')
@click.option('--crawl-delay', 'crawl_delay', type=click.FloatRange(min=0), default=None,
              help='Пауза перед каждым запросом (секунд)')
@click.option('--db', 'db_path', default=None, help="Файл SQLite (':memory:' — без сохранения)")
@click.option('--no-sitemaps', 'no_sitemaps', is_flag=True, help='Не засевать очередь из sitemap')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут одного обхода (секунд)')
@click.pass_context
def crawl(ctx, url, input_path, companies, runs, parallel, max_pages, filter_urls, crawl_delay,
          db_path, no_sitemaps, json_output, pretty, crawl_timeout):
    """Обойти сайт(ы) и сохранить сводку по страницам."""
    cfg = _apply_overrides(
        ctx.obj['config'],
        parallel=parallel,
        max_pages=max_pages,
        filter_urls=filter_urls,
        crawl_delay=crawl_delay,
        db_path=db_path,
        use_sitemaps=False if no_sitemaps else None,
    )

    if url:
        targets = [(url, url)]
    elif input_path:
        if not input_path.is_file():
            print_error(f'Файл не найден: {input_path}')
        targets = load_companies(input_path)
    else:
        print_error('Укажите --url или --input')
    if companies > 0:
        targets = targets[:companies]

    reports: List[CrawlReport] = []
    for name, site in targets:
        for run in range(1, runs + 1):
            logger.info('[Run %d] Crawling %s (%s)', run, name, site)
            try:
                pages = asyncio.run(asyncio.wait_for(start_crawl(cfg, site), timeout=crawl_timeout))
            except asyncio.TimeoutError:
                logger.error('Crawl of %s did not finish within %s seconds', site, crawl_timeout)
                reports.append(CrawlReport(name=name, url=site, run=run,
                                           error=f'обход не завершён за {crawl_timeout} секунд'))
                continue
            except Exception as e:
                logger.error('Crawl of %s failed: %s', site, e)
                reports.append(CrawlReport(name=name, url=site, run=run, error=str(e)))
                continue
            if not pages:
                logger.warning('No pages could be crawled from %s', site)
            reports.append(aggregate_results(pages, name=name, url=site, run=run))

    if reports and all(r.error for r in reports):
        print_error(f'Ошибка при обходе: {reports[-1].error}')

    if json_output:
        try:
            saved = render_json(reports, json_output)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps([r.to_dict() for r in reports], ensure_ascii=False, indent=indent))


@cli.command('discover', context_settings=CONTEXT_SETTINGS)
@click.option('--url', 'url', required=True, help='Сайт для поиска sitemap')
@click.option('--max-urls', 'max_urls', type=click.IntRange(min=1), default=None,
              help='Максимум URL из sitemap')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def discover(ctx, url, max_urls, pretty):
    """Найти URL сайта по robots.txt и sitemap."""
    cfg = _apply_overrides(ctx.obj['config'], sitemap_max_urls=max_urls)
    try:
        entries = asyncio.run(start_discovery(cfg, url))
    except Exception as e:
        print_error(f'Ошибка при поиске sitemap: {e}')
    data = [
        {
            'url': e.url,
            'source': e.source,
            'lastmod': e.lastmod,
            'priority': e.priority,
            'changefreq': e.changefreq,
        }
        for e in entries
    ]
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
