"""
Вспомогательные средства для проверки скомпилированных шаблонов.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from tagc.config import CompilerOptions
from tagc.template import CompiledTemplate, compile_template

from .markup import read


@dataclass
class RecordingRuntime:
    """
    Заглушка исполняющей среды: запоминает вызовы template(html, bindings).
    """
    binding_types: Dict[str, int] = field(default_factory=lambda: {
        "EACH": 0, "IF": 1, "SIMPLE": 2, "TAG": 3,
    })
    expression_types: Dict[str, int] = field(default_factory=lambda: {
        "ATTRIBUTE": 0, "EVENT": 1, "TEXT": 2, "VALUE": 3,
    })
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def template(self, html: str, bindings: List[Dict[str, Any]]) -> Dict[str, Any]:
        handle = {"html": html, "bindings": bindings}
        self.calls.append(handle)
        return handle


def compile_markup(
    source: str,
    options: Optional[CompilerOptions] = None,
    brackets: Sequence[str] = ("{", "}"),
) -> CompiledTemplate:
    """Читает разметку и компилирует её корневой узел."""
    return compile_template(read(source, brackets), options)


__all__ = ["RecordingRuntime", "compile_markup"]
