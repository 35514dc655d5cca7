"""
Tests for the component script export style check.
"""

import pytest

from tagc import MixedExportStyleError, TagCompilerError, check_export_style
from tagc.component import uses_export_default, uses_root_this


class TestExportStyle:

    def test_modern_export_only(self):
        script = "export default {\n  onMounted() {\n    this.update()\n  }\n}\n"

        assert uses_export_default(script)
        assert not uses_root_this(script)
        check_export_style(script)

    def test_legacy_root_this_only(self):
        script = "this.items = []\nthis.add = (item) => this.items.push(item)\n"

        assert uses_root_this(script)
        assert not uses_export_default(script)
        check_export_style(script)

    def test_mixed_styles(self):
        script = "this.foo = 1\n\nexport default {\n  name: 'x'\n}\n"

        with pytest.raises(MixedExportStyleError) as exc:
            check_export_style(script)

        assert isinstance(exc.value, TagCompilerError)
        assert str(exc.value) == 'You can\'t use "export default {}" and root this statements in the same component'

    def test_nested_this_is_not_root(self):
        script = "function setup() {\n  this.x = 1\n}\nexport default {}\n"
        check_export_style(script)

    def test_comments_and_strings_are_ignored(self):
        script = (
            "// this.foo = 1\n"
            "/* this.bar = 2\n"
            "   this.baz = 3 */\n"
            "const s = 'this.{'\n"
            "export default {}\n"
        )
        assert not uses_root_this(script)
        check_export_style(script)
