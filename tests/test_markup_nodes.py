"""
Тесты узлов разметки и сериализации тегов.
"""

from tagc.markup import Attribute, ExpressionSpan, NodeKind, TagNode, element, is_native, is_void, text
from tagc.markup.html import render_open_tag


def test_node_kinds():
    assert element("p").kind == NodeKind.TAG
    assert text("hi").kind == NodeKind.TEXT
    assert text("{a}", ExpressionSpan("a", 0, 3)).kind == NodeKind.EXPRESSION


def test_blank_text():
    assert text(" \n ").is_blank
    assert not text("x").is_blank


def test_attribute_flags():
    assert Attribute("muted").is_boolean
    assert not Attribute("class", "a").is_dynamic
    assert Attribute("class", "{a}", (ExpressionSpan("a", 0, 3),)).is_dynamic


def test_without_attributes_returns_copy():
    node = element("li", attributes=(Attribute("each", "x in xs"), Attribute("class", "row")))
    stripped = node.without_attributes("each")

    assert isinstance(stripped, TagNode)
    assert [a.name for a in stripped.attributes] == ["class"]
    assert node.has_attribute("each")


def test_element_classification():
    assert is_void("IMG")
    assert is_void("spacer", {"spacer"})
    assert not is_void("div")
    assert is_native("div")
    assert is_native("linearGradient")
    assert not is_native("my-tag")
    assert is_native("spacer", {"spacer"})


def test_render_open_tag():
    attributes = [Attribute("class", 'say "hi"'), Attribute("hidden")]

    assert render_open_tag("p", attributes, marker="expr0") == '<p expr0 class="say &quot;hi&quot;" hidden>'
    assert render_open_tag("br", void=True) == "<br/>"
