"""
Base generator interface for all code generation targets.

Defines the contract that all language generators implement and the two
output layouts shared by every language:

- library: one module per table, a shared enum module and a package entry
  point re-exporting the generated types
- flat: a single file holding everything
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...errors import CodeGenError
from ...logging_config import get_logger
from ...schema import Schema, Table, TypeKind
from .config import CodeGenConfig, OutputMode
from .templates import TemplateEngine, TemplateError

logger = get_logger(__name__)

ENUMS_ARTIFACT = "enums"
FLAT_ARTIFACT = "flat"


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self):
        """Initialize generator and load its templates."""
        self._template_engine = TemplateEngine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py')."""
        pass

    @property
    @abstractmethod
    def index_module_name(self) -> str:
        """Return the module name of the package entry point (e.g., '__init__')."""
        pass

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Return the directory containing templates for this generator."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        return self._template_engine

    # Rendering hooks implemented per language

    @abstractmethod
    def render_enums(self, schema: Schema) -> str:
        """Render the shared enum module."""
        pass

    @abstractmethod
    def render_table(self, table: Table, schema: Schema, config: CodeGenConfig) -> str:
        """Render the module for a single table."""
        pass

    @abstractmethod
    def render_index(self, schema: Schema, config: CodeGenConfig) -> str:
        """Render the package entry point re-exporting generated types."""
        pass

    @abstractmethod
    def render_flat(self, schema: Schema, config: CodeGenConfig) -> str:
        """Render every enum and table into a single module."""
        pass

    # Generation

    def generate(self, schema: Schema, config: CodeGenConfig) -> "GenerationResult":
        """
        Generate code for a schema and write it to ``config.output_path``.

        Args:
            schema: Introspected schema
            config: Output settings

        Returns:
            GenerationResult listing the files written

        Raises:
            CodeGenError: If any artifact fails to render or write. Generation
                stops at the first failure.
        """
        logger.info(
            "Generating %s code in %s mode (%s style) into %s",
            self.language_name,
            config.output_mode.value,
            config.function_style.value,
            config.output_path,
        )

        result = GenerationResult(
            metadata={
                "language": self.language_name,
                "file_extension": self.file_extension,
                "output_mode": config.output_mode.value,
                "function_style": config.function_style.value,
                "table_count": len(schema.tables),
                "enum_count": len(schema.enums),
            }
        )

        if config.output_mode == OutputMode.FLAT:
            self._generate_flat(schema, config, result)
        else:
            self._generate_library(schema, config, result)

        logger.info(
            "%s code generation complete: %d files written",
            self.language_name,
            len(result.files),
        )
        return result

    def _generate_library(
        self, schema: Schema, config: CodeGenConfig, result: "GenerationResult"
    ):
        output_dir = config.output_path
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CodeGenError(str(output_dir), f"Cannot create directory: {e}") from e
        logger.debug("Output directory ready: %s", output_dir)

        if schema.enums:
            code = self.render_enums(schema)
            self.write_artifact(
                ENUMS_ARTIFACT, output_dir / self.module_file(ENUMS_ARTIFACT), code, result
            )

        for table in schema.tables:
            code = self.render_table(table, schema, config)
            self.write_artifact(
                table.name, output_dir / self.module_file(table.name), code, result
            )

        # Written last: it imports every module above
        code = self.render_index(schema, config)
        self.write_artifact(
            self.index_module_name,
            output_dir / self.module_file(self.index_module_name),
            code,
            result,
        )

    def _generate_flat(
        self, schema: Schema, config: CodeGenConfig, result: "GenerationResult"
    ):
        final_path = self.flat_output_path(config.output_path)

        parent = final_path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CodeGenError(str(parent), f"Cannot create directory: {e}") from e

        code = self.render_flat(schema, config)
        self.write_artifact(FLAT_ARTIFACT, final_path, code, result)

    def module_file(self, module_name: str) -> str:
        return f"{module_name}{self.file_extension}"

    def flat_output_path(self, output_path: Path) -> Path:
        """
        Return ``output_path`` ending in this language's file extension.

        Any other extension is kept and the language extension appended
        (``models.v2`` becomes ``models.v2.py``).
        """
        if output_path.suffix == self.file_extension:
            return output_path
        return output_path.with_name(output_path.name + self.file_extension)

    # Template helper methods

    def render_artifact(
        self, artifact: str, template_name: str, context: Dict[str, Any]
    ) -> str:
        """
        Render a template for one artifact and tidy the result.

        Raises:
            CodeGenError: Naming ``artifact`` if rendering fails
        """
        try:
            code = self.template_engine.render_template(template_name, context)
        except TemplateError as e:
            logger.error("Rendering %s failed: %s", artifact, e)
            raise CodeGenError(artifact, str(e)) from e
        return self.format_code(code)

    def write_artifact(
        self, artifact: str, path: Path, content: str, result: "GenerationResult"
    ):
        """Write one rendered artifact, recording it on ``result``."""
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("Writing %s to %s failed: %s", artifact, path, e)
            raise CodeGenError(artifact, f"Failed to write {path}: {e}") from e

        result.files.append(path)
        logger.debug("Generated %s -> %s", artifact, path)

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Strips trailing whitespace, collapses runs of more than two blank
        lines and ends the file with exactly one newline.
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    def validate_schema(self, schema: Schema) -> List[str]:
        """
        Check a schema for conditions that limit the generated code.

        Language generators can override this to add their own checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for table in schema.tables:
            if not table.columns:
                warnings.append(f"Table '{table.name}' has no columns")

            if not table.primary_key:
                warnings.append(
                    f"Table '{table.name}' has no primary key - "
                    "get/update/delete operations are not generated"
                )
            elif len(table.primary_key_columns()) != len(table.primary_key):
                warnings.append(
                    f"Table '{table.name}' primary key references unknown columns"
                )

            for column in table.columns:
                inner = column.data_type.innermost()
                if inner.kind == TypeKind.ENUM and schema.get_enum(inner.enum_name) is None:
                    warnings.append(
                        f"Unknown type '{inner.enum_name}' in "
                        f"{table.name}.{column.name} - treated as text"
                    )

        # Library mode writes these modules next to the per-table ones
        reserved_modules = {self.index_module_name: "package index"}
        if schema.enums:
            reserved_modules[ENUMS_ARTIFACT] = "enums"
        for table in schema.tables:
            if table.name in reserved_modules:
                warnings.append(
                    f"Table '{table.name}' has the same module name as the generated "
                    f"{reserved_modules[table.name]} module - library output is overwritten"
                )

        return warnings


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Optional[List[Path]] = None,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Paths written, in write order
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files if files is not None else []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.skipped = False
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    @classmethod
    def empty(cls, schema_name: str) -> "GenerationResult":
        """Create a result for a schema with no tables; nothing is generated."""
        result = cls(metadata={"schema": schema_name, "table_count": 0})
        result.skipped = True
        return result

    @property
    def failed_artifact(self) -> Optional[str]:
        if isinstance(self.exception, CodeGenError):
            return self.exception.artifact
        return None


def generate_code(
    generator: CodeGenerator, schema: Schema, config: CodeGenConfig
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    A schema without tables produces a skipped result and no files.

    Args:
        generator: Code generator instance
        schema: Schema to generate code for
        config: Output settings

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    if not schema.tables:
        logger.warning("No tables in schema '%s'; nothing to generate", schema.name)
        return GenerationResult.empty(schema.name)

    warnings = generator.validate_schema(schema)
    for warning in warnings:
        logger.warning(warning)

    try:
        result = generator.generate(schema, config)
    except CodeGenError as e:
        logger.error("%s", e)
        failed = GenerationResult.error(str(e), exception=e)
        failed.warnings = warnings
        return failed

    result.warnings = warnings
    result.metadata["schema"] = schema.name
    return result
