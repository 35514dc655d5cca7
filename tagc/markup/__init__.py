from .nodes import (
    NodeKind,
    ExpressionSpan,
    Attribute,
    Node,
    TextNode,
    TagNode,
    AnyNode,
    text,
    element,
)
from .html import VOID_ELEMENTS, HTML_ELEMENTS, is_void, is_native

__all__ = [
    "NodeKind",
    "ExpressionSpan",
    "Attribute",
    "Node",
    "TextNode",
    "TagNode",
    "AnyNode",
    "text",
    "element",
    "VOID_ELEMENTS",
    "HTML_ELEMENTS",
    "is_void",
    "is_native",
]
