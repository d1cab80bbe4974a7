"""
Python code generator module.

Generates dataclass records and psycopg 3 data access code from an
introspected database schema.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import enum_member_name, enum_members, sanitize_identifier
from .types import python_type

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "sanitize_identifier",
    "enum_member_name",
    "enum_members",
    # Types
    "python_type",
]
