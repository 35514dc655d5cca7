from .model import (
    ExpressionType,
    BindingType,
    Expression,
    Binding,
    Template,
    Slot,
    SimpleBinding,
    IfBinding,
    EachBinding,
    TagBinding,
)
from .markers import MarkerAllocator
from .policy import AttributePolicy
from .context import BuildContext
from .builder import TemplateBuilder
from .serializer import CompiledTemplate
from .compiler import compile_template

__all__ = [
    "ExpressionType",
    "BindingType",
    "Expression",
    "Binding",
    "Template",
    "Slot",
    "SimpleBinding",
    "IfBinding",
    "EachBinding",
    "TagBinding",
    "MarkerAllocator",
    "AttributePolicy",
    "BuildContext",
    "TemplateBuilder",
    "CompiledTemplate",
    "compile_template",
]
