from .model import CompilerOptions, DEFAULT_OPTIONS
from .load import load_options, parse_options

__all__ = ["CompilerOptions", "DEFAULT_OPTIONS", "load_options", "parse_options"]
