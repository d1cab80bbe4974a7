"""
sqlift code generation module.

Generates data access code in various languages from an introspected schema.
"""

from .core.config import CodeGenConfig, FunctionStyle, OutputMode
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)

__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "CodeGenConfig",
    "OutputMode",
    "FunctionStyle",
    "generate_code",
    "get_generator",
    "get_registry",
    "list_supported_languages",
]
