"""
Language-specific code generators.

Each language lives in its own subpackage and is registered with the
generator registry.
"""

from .python import PythonGenerator

__all__ = ["PythonGenerator"]
