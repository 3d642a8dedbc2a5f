# page_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта PageScout.

Сериализация списка CrawlReport (или любых JSON-совместимых данных) в файл.
"""
import json
from pathlib import Path
from typing import Any, Iterable, Union

from page_scout.aggregator import CrawlReport


def _serializable(data: Union[CrawlReport, Iterable[Any], Any]) -> Any:
    if isinstance(data, CrawlReport):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_serializable(item) for item in data]
    return data


def render_json(data: Union[CrawlReport, Iterable[Any], Any], output_path: Union[Path, str]) -> Path:
    """
    Сохраняет отчёт в формате JSON по указанному пути.

    :param data: CrawlReport, список отчётов или уже готовые словари
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from page_scout.report.json_report import render_json
    report_path = render_json([report], 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    # Запись в файл с отступами и Unicode
    with output.open("w", encoding="utf-8") as f:
        json.dump(_serializable(data), f, ensure_ascii=False, indent=2)

    return output
