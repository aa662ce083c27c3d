"""
Command-line interface for companion source generation.

Reads a type descriptor document from a file, URL or standard input, runs
the companion generators over it, and writes the generated sources into an
output directory or previews them on the console.
"""

import argparse
import sys
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen.core.config import ConfigError, GeneratorConfig, load_config
from .codegen.core.elements import DescriptorError, TypeElement
from .codegen.processor import (
    CompanionProcessor,
    DiagnosticKind,
    Filer,
    MemoryFiler,
    ProcessingEnvironment,
    RoundEnvironment,
)
from .codegen.registry import (
    RegistryError,
    get_generator_info,
    get_registry,
    list_all_generator_info,
)
from .logging_config import get_logger, setup_logging
from .utils import (
    DescriptorLoaderError,
    load_descriptors,
    load_json_from_stream,
    parse_descriptors,
)

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="companion-gen",
        description="Generate factory and observable companion classes for annotated types",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  companion-gen generate types.json --output build/generated
  companion-gen generate --url https://example.com/types.json -g factory
  companion-gen generate --stdin < types.json
  companion-gen list-generators
  companion-gen generator-info observable
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: $COMPANION_GEN_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser(
        "generate", help="Generate companion sources from a descriptor document"
    )
    input_group = generate.add_mutually_exclusive_group(required=True)
    input_group.add_argument("file", nargs="?", help="Descriptor document (JSON)")
    input_group.add_argument("--url", help="URL to fetch the descriptor document from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the descriptor document from standard input"
    )
    generate.add_argument(
        "--generator",
        "-g",
        action="append",
        metavar="NAME",
        help="Generator to run (repeatable; default: all)",
    )
    generate.add_argument(
        "--output",
        "-o",
        metavar="DIR",
        help="Directory to write sources into (default: preview on the console)",
    )
    generate.add_argument("--config", metavar="FILE", help="JSON configuration file")
    generate.add_argument(
        "--no-comments", action="store_true", help="Don't write header comments"
    )
    generate.add_argument("--indent", type=int, metavar="N", help="Spaces per indent level")
    generate.add_argument(
        "--line-ending", choices=["lf", "crlf"], help="Line terminator for generated files"
    )
    generate.add_argument(
        "--verbose", action="store_true", help="Show a table of generated units"
    )
    generate.set_defaults(func=_handle_generate)

    list_parser = subparsers.add_parser("list-generators", help="List available generators")
    list_parser.set_defaults(func=lambda args: _list_generators())

    info_parser = subparsers.add_parser(
        "generator-info", help="Show detailed information about a generator"
    )
    info_parser.add_argument("name", help="Generator name or alias")
    info_parser.set_defaults(func=lambda args: _show_generator_info(args.name))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``companion-gen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _handle_generate(args: argparse.Namespace) -> int:
    elements = _load_elements(args)
    names = _resolve_generators(args.generator)
    configs = {name: _build_config(args, name) for name in names}

    registry = get_registry()
    generators = [registry.create_generator(name, configs[name]) for name in names]
    filer = Filer(args.output) if args.output else MemoryFiler()
    environment = ProcessingEnvironment(filer=filer)
    processor = CompanionProcessor(environment, generators)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(
            f"[green]Generating sources for {len(elements)} type(s)...", total=None
        )
        report = processor.process(RoundEnvironment(elements))
        progress.remove_task(task)

    if isinstance(filer, MemoryFiler):
        _preview(filer.sources)

    if args.verbose and report.units:
        _print_units_table(report.units)

    messager = environment.messager
    if messager.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for diagnostic in messager.warnings:
            console.print(f"  [yellow]•[/yellow] {diagnostic.element}: {diagnostic.message}")

    for diagnostic in messager.of_kind(DiagnosticKind.ERROR):
        console.print(f"[red]✗[/red] {diagnostic.element}: {diagnostic.message}")

    if args.output:
        console.print(
            f"[green]✓[/green] Generated {len(report.generated)} file(s) in [cyan]{args.output}[/cyan]"
        )

    return 0 if report.success else 1


def _load_elements(args: argparse.Namespace) -> List[TypeElement]:
    """Read the descriptor document named on the command line."""
    try:
        if args.stdin:
            source, data = load_json_from_stream(sys.stdin)
            return parse_descriptors(data, source)
        source, elements = load_descriptors(file_path=args.file, url=args.url)
        return elements
    except FileNotFoundError as e:
        raise CLIError(str(e)) from e
    except (DescriptorLoaderError, DescriptorError) as e:
        raise CLIError(f"Failed to load descriptors: {e}") from e


def _resolve_generators(requested: Optional[List[str]]) -> List[str]:
    registry = get_registry()
    if not requested:
        return registry.list_generators()

    names = []
    for name in requested:
        try:
            resolved = registry.resolve(name)
        except RegistryError as e:
            raise CLIError(str(e)) from e
        if resolved not in names:
            names.append(resolved)
    return names


def _build_config(args: argparse.Namespace, generator: str) -> GeneratorConfig:
    """Merge the config file and command-line overrides for one generator."""
    overrides: Dict[str, object] = {}
    if args.no_comments:
        overrides["add_comments"] = False
    if args.indent is not None:
        overrides["indent_width"] = args.indent
    if args.line_ending:
        overrides["line_ending"] = args.line_ending

    try:
        return load_config(generator, overrides, args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def _preview(sources: Dict[str, str]) -> None:
    border = "═" * 30
    for qualified_name, code in sources.items():
        console.print(f"\n[green]{border} 📄 {qualified_name} {border}[/green]\n")
        console.print(Syntax(code, "java", theme="monokai"))


def _print_units_table(units) -> None:
    table = Table(
        title="📊 Generated Units",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Generator", style="cyan")
    table.add_column("Output", style="green")
    table.add_column("Status")

    for unit in units:
        status = "[green]✓[/green]" if unit.success else "[red]✗[/red]"
        table.add_row(unit.source, unit.generator, unit.qualified_name or "-", status)

    console.print()
    console.print(table)


def _list_generators() -> int:
    """List registered generators with details."""
    generator_info = list_all_generator_info()

    if not generator_info:
        console.print("[yellow]⚠️ No generators available[/yellow]")
        return 0

    table = Table(title="📋 Available Generators", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Generator", style="bold green", no_wrap=True)
    table.add_column("Annotation", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name, info in sorted(generator_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {name}", info["annotation_key"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] companion-gen generate [dim]types.json[/dim] -g [cyan]GENERATOR[/cyan]\n"
            "[bold]Info:[/bold] companion-gen generator-info [cyan]GENERATOR[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_generator_info(name: str) -> int:
    """Show detailed information about one generator."""
    try:
        info = get_generator_info(name)
    except RegistryError as e:
        console.print(f"[red]✗ Generator '{name}' is not available[/red]")
        console.print(f"[dim]{e}[/dim]")
        return 1

    info_text = f"""[bold]Generator:[/bold] {info['name']}
[bold]Description:[/bold] {info['description']}
[bold]Annotation Key:[/bold] {info['annotation_key']}
[bold]Provenance:[/bold] {info['provenance']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""
    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green")
    )

    config = load_config(info["name"])
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")
    config_table.add_row("Indent Width", str(config.indent_width))
    config_table.add_row("Line Ending", repr(config.line_ending))
    config_table.add_row("Generated Annotation", str(config.generated_annotation))
    config_table.add_row("Control Namespace", config.control_namespace)
    config_table.add_row("Add Comments", str(config.add_comments))
    for key, value in sorted(config.generator_options.items()):
        config_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(config_table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
