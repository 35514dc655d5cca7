"""
Загрузчик настроек компилятора из YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import CompilerOptions, DEFAULT_OPTIONS

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_options(path: Union[str, Path]) -> CompilerOptions:
    """
    Загружает настройки компилятора.

    Args:
        path: Путь к YAML файлу настроек

    Returns:
        Настройки из файла, либо настройки по умолчанию, если файла нет
    """
    p = Path(path)
    if not p.is_file():
        return DEFAULT_OPTIONS
    return CompilerOptions.from_dict(_read_yaml_map(p))


def parse_options(text: str) -> CompilerOptions:
    """Разбирает настройки из YAML-строки (например, из секции компонента)."""
    try:
        raw = _yaml.load(text) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML options: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError("YAML options must be a mapping")
    return CompilerOptions.from_dict(raw)


__all__ = ["load_options", "parse_options"]
