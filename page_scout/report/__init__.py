"""page_scout.report: Сохранение отчётов об обходе, используемое CLI и тестами."""

from page_scout.report.json_report import render_json

__all__ = ["render_json"]
