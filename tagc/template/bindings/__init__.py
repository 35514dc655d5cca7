from .simple import create_simple_binding, create_fragment_text_binding, has_dynamic_content
from .conditional import IF_DIRECTIVE, create_if_binding
from .each import EACH_DIRECTIVE, KEY_DIRECTIVE, parse_each_directive, create_each_binding
from .tag import SLOT_ATTRIBUTE, DEFAULT_SLOT, create_tag_binding

__all__ = [
    "create_simple_binding",
    "create_fragment_text_binding",
    "has_dynamic_content",
    "IF_DIRECTIVE",
    "create_if_binding",
    "EACH_DIRECTIVE",
    "KEY_DIRECTIVE",
    "parse_each_directive",
    "create_each_binding",
    "SLOT_ATTRIBUTE",
    "DEFAULT_SLOT",
    "create_tag_binding",
]
