"""
Tests for the three output forms of a compiled template.
"""

from tagc.expressions.evaluator import Evaluator

from tests.infrastructure import RecordingRuntime, compile_markup


class TestToDict:

    def test_simple_binding(self):
        data = compile_markup("<p class={cls}>{text}</p>").to_dict()

        assert data == {
            "html": "<p expr0><!----></p>",
            "bindings": [{
                "type": "simple",
                "selector": "[expr0]",
                "expressions": [
                    {"type": "attribute", "name": "class", "evaluate": "scope => scope.cls"},
                    {"type": "text", "child_node_index": 0, "evaluate": "scope => scope.text"},
                ],
            }],
        }

    def test_nested_template(self):
        data = compile_markup("<p if={show}>{a}</p>").to_dict()
        binding = data["bindings"][0]

        assert binding["type"] == "if"
        assert binding["evaluate"] == "scope => scope.show"
        assert binding["template"] == {
            "html": "<p expr1><!----></p>",
            "bindings": [{
                "type": "simple",
                "selector": "[expr1]",
                "expressions": [{"type": "text", "child_node_index": 0, "evaluate": "scope => scope.a"}],
            }],
        }

    def test_each_binding(self):
        data = compile_markup("<li each={(item, i) in items} key={item.id}></li>").to_dict()

        assert data["bindings"][0] == {
            "type": "each",
            "selector": "[expr0]",
            "item_name": "item",
            "index_name": "i",
            "get_key": "scope => scope.item.id",
            "evaluate": "scope => scope.items",
            "template": {"html": "<li></li>", "bindings": []},
        }

    def test_tag_binding(self):
        data = compile_markup('<my-tag label="x"><b>hi</b></my-tag>').to_dict()

        assert data["bindings"][0] == {
            "type": "tag",
            "selector": "[expr0]",
            "component": "my-tag",
            "slots": [{"id": "default", "html": "<b>hi</b>", "bindings": []}],
            "attributes": [{"type": "attribute", "name": "label", "evaluate": "scope => 'x'"}],
        }

    def test_empty_template(self):
        assert compile_markup("").to_dict() == {"html": "", "bindings": []}


class TestToSource:

    def test_simple_binding(self):
        source = compile_markup("<p class={cls}></p>").to_source()

        assert source == (
            "template('<p expr0></p>', [\n"
            "  {\n"
            "    type: bindingTypes.SIMPLE,\n"
            "    selector: '[expr0]',\n"
            "    expressions: [\n"
            "      {\n"
            "        type: expressionTypes.ATTRIBUTE,\n"
            "        name: 'class',\n"
            "        evaluate: scope => scope.cls\n"
            "      }\n"
            "    ]\n"
            "  }\n"
            "])"
        )

    def test_keys_are_camel_case(self):
        source = compile_markup("<li each={(item, i) in items}>{item}</li>").to_source()

        assert "itemName: 'item'" in source
        assert "indexName: 'i'" in source
        assert "childNodeIndex: 0" in source

    def test_nested_templates_are_calls(self):
        source = compile_markup("<p if={show}>hi</p>").to_source()

        assert source.startswith("template('<p expr0></p>', [")
        assert "template: template('<p>hi</p>', [])" in source
        assert "evaluate: scope => scope.show" in source

    def test_object_expression_is_parenthesised(self):
        source = compile_markup("<my-tag options={{ a: 1 }}></my-tag>").to_source()
        assert "evaluate: scope => ({ a: 1 })" in source

    def test_static_markup(self):
        assert compile_markup("<p>hi</p>").to_source() == "template('<p>hi</p>', [])"


class TestRuntimeCall:

    def setup_method(self):
        self.runtime = RecordingRuntime()

    def test_types_are_resolved(self):
        handle = compile_markup("<input value={v} onchange={save}/>")(self.runtime)

        binding = handle["bindings"][0]
        assert binding["type"] == self.runtime.binding_types["SIMPLE"]
        assert [e["type"] for e in binding["expressions"]] == [
            self.runtime.expression_types["VALUE"],
            self.runtime.expression_types["EVENT"],
        ]

    def test_evaluators_are_passed_through(self):
        handle = compile_markup("<p>{a}</p>")(self.runtime)
        evaluate = handle["bindings"][0]["expressions"][0]["evaluate"]

        assert isinstance(evaluate, Evaluator)
        assert evaluate({"a": 1}) == 1

    def test_nested_templates_use_runtime(self):
        handle = compile_markup("<p if={show}>{a}</p>")(self.runtime)

        assert len(self.runtime.calls) == 2
        inner = handle["bindings"][0]["template"]
        assert inner is self.runtime.calls[0]
        assert handle is self.runtime.calls[1]
        assert inner["html"] == "<p expr1><!----></p>"
