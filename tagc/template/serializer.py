"""
Сериализация скомпилированных шаблонов.

Скомпилированный шаблон выдаётся в одной из форм:
- ``to_source()``: исходный текст вызова ``template(html, bindings)``
  для исполняющей среды
- ``to_dict()``: простые данные, вычислители в виде строк ``scope => ...``
- вызов артефакта с объектом помощников среды, который подставляет типы
  привязок и выражений и собирает вложенные шаблоны через эту среду
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, cast

from ..expressions.evaluator import Evaluator
from ..expressions.model import quote_string
from .model import (
    Binding,
    BindingType,
    EachBinding,
    Expression,
    ExpressionType,
    IfBinding,
    SimpleBinding,
    Slot,
    TagBinding,
    Template,
)


class _Code(str):
    """Фрагмент исходного текста, выводимый как есть."""


@dataclass(frozen=True)
class _Renderer:
    """Представление листовых значений в одной из форм вывода."""
    evaluator: Callable[[Evaluator], Any]
    binding_type: Callable[[BindingType], Any]
    expression_type: Callable[[ExpressionType], Any]
    template: Callable[[str, List[Any]], Any]


def _expression_data(expression: Expression, renderer: _Renderer) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": renderer.expression_type(expression.type)}
    if expression.name is not None:
        data["name"] = expression.name
    if expression.child_node_index is not None:
        data["child_node_index"] = expression.child_node_index
    data["evaluate"] = renderer.evaluator(expression.evaluate)
    return data


def _template_data(template: Template, renderer: _Renderer) -> Any:
    return renderer.template(template.html, [_binding_data(b, renderer) for b in template.bindings])


def _slot_data(slot: Slot, renderer: _Renderer) -> Dict[str, Any]:
    return {
        "id": slot.id,
        "html": slot.html,
        "bindings": [_binding_data(b, renderer) for b in slot.bindings],
    }


def _binding_data(binding: Binding, renderer: _Renderer) -> Dict[str, Any]:
    binding_type = binding.get_type()
    data: Dict[str, Any] = {"type": renderer.binding_type(binding_type)}
    if binding.selector is not None:
        data["selector"] = binding.selector

    if binding_type == BindingType.SIMPLE:
        simple = cast(SimpleBinding, binding)
        data["expressions"] = [_expression_data(e, renderer) for e in simple.expressions]
    elif binding_type == BindingType.IF:
        conditional = cast(IfBinding, binding)
        data["evaluate"] = renderer.evaluator(conditional.evaluate)
        data["template"] = _template_data(conditional.template, renderer)
    elif binding_type == BindingType.EACH:
        each = cast(EachBinding, binding)
        data["item_name"] = each.item_name
        if each.index_name is not None:
            data["index_name"] = each.index_name
        if each.condition is not None:
            data["condition"] = renderer.evaluator(each.condition)
        if each.get_key is not None:
            data["get_key"] = renderer.evaluator(each.get_key)
        data["evaluate"] = renderer.evaluator(each.evaluate)
        data["template"] = _template_data(each.template, renderer)
    elif binding_type == BindingType.TAG:
        tag = cast(TagBinding, binding)
        data["component"] = tag.component
        data["slots"] = [_slot_data(s, renderer) for s in tag.slots]
        data["attributes"] = [_expression_data(e, renderer) for e in tag.attributes]
    else:
        raise ValueError(f"Unknown binding type: {binding_type}")

    return data


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _render_js(value: Any, indent: int = 0) -> str:
    """Печатает вложенные словари и списки как литерал JS."""
    pad = "  " * indent
    inner = "  " * (indent + 1)
    if isinstance(value, _Code):
        return str(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [f"{inner}{_camel(k)}: {_render_js(v, indent + 1)}" for k, v in value.items()]
        return "{\n" + ",\n".join(items) + "\n" + pad + "}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [inner + _render_js(v, indent + 1) for v in value]
        return "[\n" + ",\n".join(items) + "\n" + pad + "]"
    raise TypeError(f"Cannot render value of type {type(value).__name__}")


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Результат компиляции: скелет разметки и описания привязок.

    Вызов с помощниками среды возвращает шаблон исполняющей среды.
    Помощники должны предоставлять ``template(html, bindings)`` и словари
    ``binding_types`` / ``expression_types`` с ключами по имени типа.
    """
    html: str
    bindings: Tuple[Binding, ...]

    @property
    def template(self) -> Template:
        return Template(self.html, self.bindings)

    def to_dict(self) -> Dict[str, Any]:
        renderer = _Renderer(
            evaluator=lambda e: e.to_source(),
            binding_type=lambda t: t.value,
            expression_type=lambda t: t.value,
            template=lambda html, bindings: {"html": html, "bindings": bindings},
        )
        return _template_data(self.template, renderer)

    def to_source(self) -> str:
        renderer = _Renderer(
            evaluator=lambda e: _Code(e.to_source()),
            binding_type=lambda t: _Code(f"bindingTypes.{t.name}"),
            expression_type=lambda t: _Code(f"expressionTypes.{t.name}"),
            template=lambda html, bindings: _TemplateCall(html, bindings),
        )
        return _render_template_call(_template_data(self.template, renderer), 0)

    def __call__(self, helpers: Any) -> Any:
        binding_types = helpers.binding_types
        expression_types = helpers.expression_types
        renderer = _Renderer(
            evaluator=lambda e: e,
            binding_type=lambda t: binding_types[t.name],
            expression_type=lambda t: expression_types[t.name],
            template=lambda html, bindings: helpers.template(html, bindings),
        )
        return _template_data(self.template, renderer)


@dataclass(frozen=True)
class _TemplateCall:
    html: str
    bindings: List[Any]


def _render_template_call(call: _TemplateCall, indent: int) -> str:
    return f"template({quote_string(call.html)}, {_render_with_calls(call.bindings, indent)})"


def _render_with_calls(value: Any, indent: int) -> str:
    """Печатает литерал JS, в котором вложенные шаблоны выводятся вызовами template(...)."""
    if isinstance(value, _TemplateCall):
        return _render_template_call(value, indent)
    if isinstance(value, dict):
        value = {k: _Code(_render_with_calls(v, indent + 1)) for k, v in value.items()}
    elif isinstance(value, list):
        value = [_Code(_render_with_calls(v, indent + 1)) for v in value]
    return _render_js(value, indent)


__all__ = ["CompiledTemplate"]
