"""
Configuration for code generation runs.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Union

from ...errors import ConfigError


class OutputMode(Enum):
    """How generated code is split into files."""

    LIBRARY = "library"  # one module per table plus a package entry point
    FLAT = "flat"  # everything in one file

    @classmethod
    def parse(cls, value: Union[str, "OutputMode"]) -> "OutputMode":
        return _parse_choice(cls, value)


class FunctionStyle(Enum):
    """Shape of the generated data access operations."""

    STANDALONE = "standalone"  # functions taking the connection first
    CLASS = "class"  # methods on a repository holding the connection

    @classmethod
    def parse(cls, value: Union[str, "FunctionStyle"]) -> "FunctionStyle":
        return _parse_choice(cls, value)


def _parse_choice(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(
            f"Invalid {enum_cls.__name__} '{value}'. Expected one of: {choices}"
        ) from None


@dataclass(frozen=True)
class CodeGenConfig:
    """Output settings for a generation run."""

    output_path: Path
    output_mode: OutputMode = OutputMode.LIBRARY
    function_style: FunctionStyle = FunctionStyle.STANDALONE

    def __post_init__(self):
        if not isinstance(self.output_path, Path):
            object.__setattr__(self, "output_path", Path(self.output_path))

    def with_output_mode(self, mode: Union[str, OutputMode]) -> "CodeGenConfig":
        return replace(self, output_mode=OutputMode.parse(mode))

    def with_function_style(self, style: Union[str, FunctionStyle]) -> "CodeGenConfig":
        return replace(self, function_style=FunctionStyle.parse(style))
