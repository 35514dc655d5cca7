"""
Модель настроек компилятора шаблонов.

Содержит неизменяемый объект настроек с поддержкой загрузки из словаря (YAML)
и обратной сериализации.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable

from ..errors import ConfigError


def _as_str(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Option '{key}' must be a non-empty string, got {value!r}")
    return value


def _as_names(data: Dict[str, Any], key: str, default: Iterable[str]) -> FrozenSet[str]:
    value = data.get(key, None)
    if value is None:
        return frozenset(default)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(f"Option '{key}' must be a list of names, got {type(value).__name__}")
    names = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ConfigError(f"Option '{key}' contains an invalid name: {item!r}")
        names.append(item)
    return frozenset(names)


@dataclass(frozen=True)
class CompilerOptions:
    """
    Настройки компиляции шаблона.

    Attributes:
        marker_prefix: Префикс маркеров-плейсхолдеров (expr0, expr1, ...)
        scope_name: Имя неявного параметра, через который разрешаются свободные идентификаторы
        event_prefix: Префикс имён атрибутов-обработчиков событий (onclick, oninput)
        value_attributes: Атрибуты, привязываемые к живому значению контрола формы
        extra_globals: Дополнительные глобальные имена, которые не переписываются в scope
        extra_void_elements: Дополнительные void-теги (без закрывающего тега)
        component_attribute: Атрибут, явно превращающий нативный тег в компонент
    """
    marker_prefix: str = "expr"
    scope_name: str = "scope"
    event_prefix: str = "on"
    value_attributes: FrozenSet[str] = field(default_factory=lambda: frozenset({"value"}))
    extra_globals: FrozenSet[str] = field(default_factory=frozenset)
    extra_void_elements: FrozenSet[str] = field(default_factory=frozenset)
    component_attribute: str = "is"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CompilerOptions:
        """Создание экземпляра из словаря (из YAML)."""
        if not isinstance(data, dict):
            raise ConfigError(f"Compiler options must be a mapping, got {type(data).__name__}")

        known = {
            "marker_prefix", "scope_name", "event_prefix", "value_attributes",
            "extra_globals", "extra_void_elements", "component_attribute",
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown compiler options: {', '.join(unknown)}")

        defaults = cls()
        scope_name = _as_str(data, "scope_name", defaults.scope_name)
        if not scope_name.isidentifier():
            raise ConfigError(f"Option 'scope_name' must be an identifier, got {scope_name!r}")

        return cls(
            marker_prefix=_as_str(data, "marker_prefix", defaults.marker_prefix),
            scope_name=scope_name,
            event_prefix=_as_str(data, "event_prefix", defaults.event_prefix),
            value_attributes=_as_names(data, "value_attributes", defaults.value_attributes),
            extra_globals=_as_names(data, "extra_globals", ()),
            extra_void_elements=_as_names(data, "extra_void_elements", ()),
            component_attribute=_as_str(data, "component_attribute", defaults.component_attribute),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для YAML."""
        return {
            "marker_prefix": self.marker_prefix,
            "scope_name": self.scope_name,
            "event_prefix": self.event_prefix,
            "value_attributes": sorted(self.value_attributes),
            "extra_globals": sorted(self.extra_globals),
            "extra_void_elements": sorted(self.extra_void_elements),
            "component_attribute": self.component_attribute,
        }


DEFAULT_OPTIONS = CompilerOptions()


__all__ = ["CompilerOptions", "DEFAULT_OPTIONS"]
