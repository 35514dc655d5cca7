"""
Справочные сведения об HTML-элементах и сериализация разметки.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from .nodes import Attribute

# Элементы, у которых не бывает содержимого и закрывающего тега
VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

HTML_ELEMENTS: FrozenSet[str] = frozenset({
    "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base",
    "bdi", "bdo", "blockquote", "body", "br", "button", "canvas", "caption",
    "cite", "code", "col", "colgroup", "data", "datalist", "dd", "del",
    "details", "dfn", "dialog", "div", "dl", "dt", "em", "embed", "fieldset",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
    "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
    "input", "ins", "kbd", "label", "legend", "li", "link", "main", "map",
    "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
    "optgroup", "option", "output", "p", "param", "picture", "pre",
    "progress", "q", "rp", "rt", "ruby", "s", "samp", "script", "section",
    "select", "slot", "small", "source", "span", "strong", "style", "sub",
    "summary", "sup", "table", "tbody", "td", "template", "textarea",
    "tfoot", "th", "thead", "time", "title", "tr", "track", "u", "ul", "var",
    "video", "wbr",
})

SVG_ELEMENTS: FrozenSet[str] = frozenset({
    "svg", "animate", "animateMotion", "animateTransform", "circle",
    "clipPath", "defs", "desc", "ellipse", "feBlend", "feColorMatrix",
    "feComposite", "feFlood", "feGaussianBlur", "feMerge", "feMergeNode",
    "feOffset", "filter", "foreignObject", "g", "image", "line",
    "linearGradient", "marker", "mask", "metadata", "path", "pattern",
    "polygon", "polyline", "radialGradient", "rect", "stop", "switch",
    "symbol", "text", "textPath", "tspan", "use", "view",
})

PLACEHOLDER_COMMENT = "<!---->"


def is_void(name: str, extra: Iterable[str] = ()) -> bool:
    lowered = name.lower()
    return lowered in VOID_ELEMENTS or lowered in extra


def is_native(name: str, extra: Iterable[str] = ()) -> bool:
    """Проверяет, является ли имя тега нативным HTML/SVG-элементом или объявленным в extra."""
    lowered = name.lower()
    return lowered in HTML_ELEMENTS or name in SVG_ELEMENTS or lowered in extra


def escape_attribute_value(value: str) -> str:
    return value.replace('"', "&quot;")


def render_attribute(attribute: Attribute) -> str:
    if attribute.value is None:
        return attribute.name
    return f'{attribute.name}="{escape_attribute_value(attribute.value)}"'


def render_open_tag(
    name: str,
    attributes: Iterable[Attribute] = (),
    marker: Optional[str] = None,
    void: bool = False,
) -> str:
    """
    Формирует открывающий тег.

    Маркер записывается первым атрибутом, статические атрибуты следуют
    в исходном порядке. Для void-элементов формируется самозакрывающаяся форма.
    """
    parts = [name]
    if marker:
        parts.append(marker)
    parts.extend(render_attribute(a) for a in attributes)
    inner = " ".join(parts)
    return f"<{inner}/>" if void else f"<{inner}>"


def render_close_tag(name: str) -> str:
    return f"</{name}>"


__all__ = [
    "VOID_ELEMENTS",
    "HTML_ELEMENTS",
    "SVG_ELEMENTS",
    "PLACEHOLDER_COMMENT",
    "is_void",
    "is_native",
    "escape_attribute_value",
    "render_attribute",
    "render_open_tag",
    "render_close_tag",
]
