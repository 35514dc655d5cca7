"""
Тесты TAG-привязок: атрибуты компонента и распределение детей по слотам.
"""

import pytest

from tagc.errors import InvalidTemplateError
from tagc.markup.nodes import Attribute, element, text
from tagc.template import BindingType, ExpressionType, TagBinding
from tagc.template.bindings.tag import distribute_slots


def build(builder, reader, source):
    return builder.build(reader.parse(source))


class TestTagBindings:

    def test_placeholder(self, builder, reader):
        template = build(builder, reader, "<my-tag></my-tag>")

        assert template.html == "<my-tag expr0></my-tag>"
        binding = template.bindings[0]
        assert isinstance(binding, TagBinding)
        assert binding.type == BindingType.TAG
        assert binding.selector == "[expr0]"
        assert binding.component == "my-tag"
        assert binding.attributes == ()
        assert binding.slots == ()

    def test_attributes(self, builder, reader):
        source = '<my-tag title="hi" active count={n} onselect={pick}></my-tag>'
        title, active, count, onselect = build(builder, reader, source).bindings[0].attributes

        assert (title.name, title.type) == ("title", ExpressionType.ATTRIBUTE)
        assert title.evaluate() == "hi"
        assert title.evaluate.to_source() == "scope => 'hi'"
        assert active.evaluate() is True
        assert count.evaluate({"n": 1}) == 1
        assert onselect.type == ExpressionType.EVENT

    def test_default_slot(self, builder, reader):
        binding = build(builder, reader, "<my-tag><p>{message}</p></my-tag>").bindings[0]

        assert [slot.id for slot in binding.slots] == ["default"]
        slot = binding.get_slot("default")
        assert slot.html == "<p expr1><!----></p>"
        assert slot.bindings[0].selector == "[expr1]"
        assert slot.bindings[0].expressions[0].evaluate({"message": "hi"}) == "hi"

    def test_text_slot(self, builder, reader):
        binding = build(builder, reader, "<my-tag>Hello {name}</my-tag>").bindings[0]
        slot = binding.get_slot("default")

        assert slot.html == "<!---->"
        assert slot.bindings[0].selector is None
        assert slot.bindings[0].expressions[0].evaluate({"name": "you"}) == "Hello you"

    def test_named_slots_in_first_appearance_order(self, builder, reader):
        source = """
        <my-tag>
          <h1 slot="header">{title}</h1>
          <p>body</p>
          <footer slot="footer">bye</footer>
        </my-tag>
        """
        binding = build(builder, reader, source).bindings[0]

        assert [slot.id for slot in binding.slots] == ["header", "default", "footer"]
        assert binding.get_slot("header").html == "<h1 expr1><!----></h1>"
        assert binding.get_slot("default").html == "<p>body</p>"
        assert binding.get_slot("footer").html == "<footer>bye</footer>"
        assert binding.get_slot("missing") is None

    def test_is_attribute(self, builder, reader):
        template = build(builder, reader, '<div is="my-div" class={cls}></div>')
        binding = template.bindings[0]

        assert template.html == "<div expr0></div>"
        assert binding.component == "my-div"
        assert [a.name for a in binding.attributes] == ["class"]

    def test_dynamic_slot_name(self, builder, reader):
        with pytest.raises(InvalidTemplateError, match="Slot name"):
            build(builder, reader, "<my-tag><p slot={name}>x</p></my-tag>")


class TestDistributeSlots:

    def test_blank_text_does_not_open_default_slot(self):
        header = element("h1", attributes=(Attribute("slot", "header"),))
        slots = distribute_slots([text("  "), header])

        assert list(slots) == ["header"]
        assert slots["header"][0].attributes == ()

    def test_leading_blank_text_joins_default_slot(self):
        bold = element("b")
        slots = distribute_slots([text(" "), bold])

        assert slots["default"] == [text(" "), bold]

    def test_children_order_within_slot(self):
        first = element("i")
        second = element("b")
        slots = distribute_slots([first, element("h1", attributes=(Attribute("slot", "x"),)), second])

        assert slots["default"] == [first, second]
