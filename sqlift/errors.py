"""
Exception hierarchy shared by introspection, configuration and code generation.

Template and registry errors live beside the template engine and the
generator registry.
"""


class SqliftError(Exception):
    """Base exception for all sqlift errors."""

    pass


class ConfigError(SqliftError):
    """Raised when connection settings are missing or invalid."""

    pass


class DatabaseConnectionError(SqliftError):
    """Raised when a database engine cannot be created or connected."""

    pass


class IntrospectionError(SqliftError):
    """Raised when reading the database catalog fails."""

    def __init__(self, schema: str, message: str):
        self.schema = schema
        self.message = message
        super().__init__(f"Failed to introspect schema '{schema}': {message}")


class CodeGenError(SqliftError):
    """Raised when rendering or writing a generated artifact fails."""

    def __init__(self, artifact: str, message: str):
        self.artifact = artifact
        self.message = message
        super().__init__(f"Code generation failed for '{artifact}': {message}")
