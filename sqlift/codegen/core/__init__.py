"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .config import CodeGenConfig, FunctionStyle, OutputMode
from .generator import CodeGenerator, GenerationResult, generate_code
from .templates import TemplateEngine, TemplateError

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Configuration
    "CodeGenConfig",
    "OutputMode",
    "FunctionStyle",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
]
