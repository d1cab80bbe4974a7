"""
Command-line interface for sqlift.

Usage: ``sqlift postgres python [options]``
"""

import argparse
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen.core.config import CodeGenConfig, FunctionStyle, OutputMode
from .codegen.core.generator import GenerationResult, generate_code
from .codegen.registry import RegistryError, get_registry
from .config import DbConfig
from .errors import SqliftError
from .introspect import PostgresIntrospector, TableFilter, create_db_engine
from .logging_config import configure_logging, get_logger
from .schema import Schema

logger = get_logger(__name__)

console = Console()

SUPPORTED_DATABASES = ["postgres"]

DEFAULT_OUTPUT = "./database"
DEFAULT_SCHEMA = "public"
DEFAULT_ENV_FILE = "./.env"


def _comma_list(value: str) -> List[str]:
    """Parse a comma-separated argument into a list of names."""
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlift",
        description="Generate typed Python data access code from a live database schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sqlift postgres python
  sqlift postgres python -o app/db --style class
  sqlift postgres python --mode flat -o models.py --tables users,orders
  sqlift --list-languages
        """.strip(),
    )

    parser.add_argument(
        "database",
        nargs="?",
        choices=SUPPORTED_DATABASES,
        help="Target database type",
    )
    parser.add_argument("language", nargs="?", help="Target language for generated code")

    output_group = parser.add_argument_group("output options")
    output_group.add_argument(
        "--output",
        "-o",
        default=DEFAULT_OUTPUT,
        help=f"Output directory (library mode) or file (flat mode) (default: {DEFAULT_OUTPUT})",
    )
    output_group.add_argument(
        "--mode",
        choices=[mode.value for mode in OutputMode],
        default=OutputMode.LIBRARY.value,
        help="library: one module per table; flat: a single file (default: library)",
    )
    output_group.add_argument(
        "--style",
        choices=[style.value for style in FunctionStyle],
        default=FunctionStyle.STANDALONE.value,
        help="standalone: functions taking a connection; class: repository classes "
        "(default: standalone)",
    )

    db_group = parser.add_argument_group("database options")
    db_group.add_argument(
        "--schema",
        default=DEFAULT_SCHEMA,
        help=f"Database schema to introspect (default: {DEFAULT_SCHEMA})",
    )
    db_group.add_argument(
        "--env-file",
        default=DEFAULT_ENV_FILE,
        help=f"Path to .env file with DB_* settings (default: {DEFAULT_ENV_FILE})",
    )
    db_group.add_argument(
        "--tables",
        type=_comma_list,
        metavar="A,B",
        help="Comma-separated list of tables to include (default: all)",
    )
    db_group.add_argument(
        "--exclude",
        type=_comma_list,
        metavar="C,D",
        help="Comma-separated list of tables to exclude",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Verbose output (-v for debug, -vv to also log SQL)",
    )
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.list_languages:
        return _list_languages()

    if not args.database or not args.language:
        console.print("[red]✗[/red] Database and language are required")
        console.print("[dim]Usage: sqlift postgres python [options][/dim]")
        return 1

    registry = get_registry()
    if not registry.is_supported(args.language):
        console.print(f"[red]✗ Unsupported language '{args.language}'[/red]")
        console.print(
            f"[dim]Supported languages: {', '.join(registry.list_languages())}[/dim]"
        )
        return 1

    try:
        return _run(args)
    except (SqliftError, RegistryError) as e:
        logger.debug("Run failed", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _run(args: argparse.Namespace) -> int:
    logger.info("sqlift v%s", __version__)
    logger.info(
        "Starting code generation: database=%s language=%s output=%s mode=%s "
        "style=%s schema=%s",
        args.database,
        args.language,
        args.output,
        args.mode,
        args.style,
        args.schema,
    )

    db_config = DbConfig.load(args.env_file)

    table_filter = TableFilter(include=args.tables, exclude=args.exclude)
    if table_filter.is_active:
        logger.debug("Table filter: include=%s exclude=%s", args.tables, args.exclude)

    schema = introspect_database(args.database, db_config, args.schema, table_filter)

    if not schema.tables:
        console.print("[yellow]⚠️  No tables found after filtering; nothing generated[/yellow]")
        logger.warning("No tables found after filtering")
        return 0

    logger.info(
        "Schema ready for code generation: %d tables, %d enums",
        len(schema.tables),
        len(schema.enums),
    )

    codegen_config = CodeGenConfig(
        output_path=Path(args.output),
        output_mode=OutputMode.parse(args.mode),
        function_style=FunctionStyle.parse(args.style),
    )
    logger.debug("Code generation config: %s", codegen_config)

    generator = get_registry().create_generator(args.language)
    result = generate_code(generator, schema, codegen_config)

    if not result.success:
        console.print(f"[red]✗ Generation failed:[/red] {result.error_message}")
        return 1

    _print_summary(schema, result)
    return 0


def introspect_database(
    database: str, db_config: DbConfig, schema_name: str, table_filter: TableFilter
) -> Schema:
    """
    Introspect the requested database, disposing of the engine afterwards.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
        IntrospectionError: If a catalog query fails
    """
    if database != "postgres":
        raise SqliftError(f"Unsupported database: {database}")

    engine = create_db_engine(db_config)
    try:
        return PostgresIntrospector(engine).introspect(schema_name, table_filter)
    finally:
        engine.dispose()


def _print_summary(schema: Schema, result: GenerationResult):
    table = Table(
        title=f"Generated code for schema '{schema.name}'",
        box=box.ROUNDED,
        title_style="bold cyan",
    )
    table.add_column("File", style="bold green")

    for path in result.files:
        table.add_row(str(path))

    console.print()
    console.print(table)

    if result.warnings:
        console.print(
            Panel(
                "\n".join(result.warnings),
                title="⚠️  Warnings",
                border_style="yellow",
            )
        )

    console.print(
        f"[green]✓[/green] {len(schema.tables)} tables, {len(schema.enums)} enums, "
        f"{len(result.files)} files written"
    )


def _list_languages() -> int:
    """List supported languages with details."""
    registry = get_registry()

    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in registry.list_languages():
        info = registry.get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {language}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] sqlift [cyan]postgres[/cyan] [cyan]LANGUAGE[/cyan] "
            "[dim]-o OUTPUT[/dim]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0
