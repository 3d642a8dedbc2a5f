# page_scout/__init__.py
"""
PageScout package initializer.
Defines package version and exposes the CLI group as ``main_cli``.
"""
__version__ = "0.1.0"

# под другим именем: атрибут page_scout.cli должен остаться модулем
from page_scout.cli import cli as main_cli  # noqa: E402

__all__ = ["__version__", "main_cli"]
