"""
Тесты IF-привязок.
"""

from tagc.template import BindingType, IfBinding


def build(builder, reader, source):
    return builder.build(reader.parse(source))


class TestIfBindings:

    def test_placeholder_and_selector(self, builder, reader):
        template = build(builder, reader, "<p if={1 > 2}>Hello</p>")

        assert template.html == "<p expr0></p>"
        binding = template.bindings[0]
        assert isinstance(binding, IfBinding)
        assert binding.type == BindingType.IF
        assert binding.selector == "[expr0]"

    def test_condition_value_is_not_coerced(self, builder, reader):
        binding = build(builder, reader, "<p if={1 > 2}>Hello</p>").bindings[0]
        assert binding.evaluate() is False

    def test_condition_keeps_operand(self, builder, reader):
        binding = build(builder, reader, "<p if={name}>Hello</p>").bindings[0]
        assert binding.evaluate({"name": "foo bar"}) == "foo bar"

    def test_condition_reads_nested_properties(self, builder, reader):
        binding = build(builder, reader, "<p if={opts.isVisible}>Hello</p>").bindings[0]

        assert binding.evaluate({"opts": {"isVisible": True}}) is True
        assert binding.evaluate.to_source() == "scope => scope.opts.isVisible"

    def test_plain_string_condition(self, builder, reader):
        binding = build(builder, reader, '<p if="visible">Hello</p>').bindings[0]
        assert binding.evaluate({"visible": 1}) == 1

    def test_nested_template_without_directive(self, builder, reader):
        binding = build(builder, reader, '<p if={show} class="note">Hello</p>').bindings[0]

        assert binding.template.html == '<p class="note">Hello</p>'
        assert binding.template.bindings == ()

    def test_nested_template_with_dynamic_content(self, builder, reader):
        binding = build(builder, reader, "<p if={show}>Hello {name}</p>").bindings[0]

        assert binding.template.html == "<p expr1><!----></p>"
        inner = binding.template.bindings[0]
        assert inner.selector == "[expr1]"
        assert inner.expressions[0].evaluate({"name": "you"}) == "Hello you"

    def test_if_on_void_element(self, builder, reader):
        template = build(builder, reader, "<img if={show} src={url}/>")

        assert template.html == "<img expr0/>"
        assert template.bindings[0].template.html == "<img expr1/>"
