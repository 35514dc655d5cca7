"""
Точка входа компиляции шаблона компонента.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import CompilerOptions
from ..errors import InvalidTemplateError
from ..markup.nodes import AnyNode
from .builder import TemplateBuilder
from .context import BuildContext
from .policy import AttributePolicy
from .serializer import CompiledTemplate

logger = logging.getLogger(__name__)


def compile_template(
    node: Optional[AnyNode],
    options: Optional[CompilerOptions] = None,
    *,
    required: bool = False,
    policy: Optional[AttributePolicy] = None,
) -> CompiledTemplate:
    """
    Компилирует дерево разметки в скелет и привязки.

    Для каждого вызова создаётся свежий контекст, поэтому маркеры всегда
    начинаются с нуля и повторная компиляция даёт идентичный результат.

    Args:
        node: Корень шаблона; None означает компонент без шаблона
        options: Настройки компиляции
        required: Требовать наличие шаблона
        policy: Политика классификации атрибутов вместо построенной из options

    Returns:
        Скомпилированный шаблон

    Raises:
        InvalidTemplateError: Если шаблон обязателен, но отсутствует, или корень некорректен
        TagCompilerError: При ошибках в выражениях и директивах
    """
    if node is None and required:
        raise InvalidTemplateError("Component template is required but missing")

    context = BuildContext.create(options, policy)
    logger.debug("Compiling template rooted at %s", getattr(node, "name", type(node).__name__))

    template = TemplateBuilder(context).build(node)

    logger.debug(
        "Compiled template: %d top-level bindings, %d markers",
        len(template.bindings),
        context.markers.allocated,
    )
    return CompiledTemplate(html=template.html, bindings=template.bindings)


__all__ = ["compile_template"]
