"""
Database introspection.

Provides the introspection contract and the supported database backends.
"""

from .base import Introspector, TableFilter
from .postgres import PostgresIntrospector, create_db_engine, is_auto_generated_column

__all__ = [
    "Introspector",
    "TableFilter",
    "PostgresIntrospector",
    "create_db_engine",
    "is_auto_generated_column",
]
