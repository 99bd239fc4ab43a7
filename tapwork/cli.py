"""
Tapwork CLI - Install and smoke-test prebuilt binaries from package descriptors.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core import TapworkCore
from .descriptor import PackageDescriptor
from .errors import TapworkError
from .formula import render_formula
from .loader import load_descriptor
from .settings import get_settings

# Setup
app = typer.Typer(
    name="tapwork",
    help="Install and smoke-test prebuilt binaries from package descriptors",
    add_completion=False,
)
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


def _create_command_panel(title: str, color: str, descriptor: PackageDescriptor) -> Panel:
    """Create a Rich Panel for command display.

    Args:
        title: Command title (e.g., "Tapwork Install")
        color: Border color (e.g., "blue", "cyan", "red")
        descriptor: Package the command operates on

    Returns:
        Formatted Rich Panel
    """
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Package: {descriptor.name} {descriptor.version}",
        border_style=color,
    )


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Print a command failure and exit.

    Args:
        e: Exception that occurred
        command_type: Type of command (for error message context)

    Raises:
        SystemExit: Always exits with code 1
    """
    console.print(f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {escape(str(e))}")
    output = getattr(e, "output", "")
    if output:
        console.print(f"[dim]Output:\n{escape(output.rstrip())}[/dim]")
    raise typer.Exit(code=1)


def _load(ref: str, command_type: str) -> PackageDescriptor:
    try:
        return load_descriptor(ref)
    except TapworkError as e:
        _handle_command_error(e, command_type)


def _print_caveats(text: str) -> None:
    if text:
        console.print("\n[bold yellow]==> Caveats[/bold yellow]")
        console.print(text.rstrip(), markup=False, highlight=False)


@app.command()
def install(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
    archive: Path = typer.Option(
        None, "--archive", help="Install from a local archive instead of downloading"
    ),
    bin_dir: Path = typer.Option(
        None, "--bin-dir", help="Binary directory (overrides TW_BIN_DIR)"
    ),
    skip_test: bool = typer.Option(
        False, "--skip-test", help="Do not run the post-install self-test"
    ),
):
    """Fetch, verify and install a package, then run its self-test."""
    descriptor = _load(formula, "install")
    console.print(_create_command_panel("Tapwork Install", "blue", descriptor))

    try:
        result = TapworkCore().install(
            descriptor, archive=archive, bin_dir=bin_dir, run_test=not skip_test
        )
    except (TapworkError, OSError) as e:
        _handle_command_error(e, "install")

    console.print(f"\n[bold green]✓ Installed[/bold green] {result['binary']}")
    console.print(f"[dim]SHA-256: {result['digest']}[/dim]")

    if result["verified"]:
        console.print("[bold green]✓ Self-test passed[/bold green]")
    elif result["test_error"]:
        console.print(f"[yellow]⚠ Self-test failed:[/yellow] {escape(result['test_error'])}")

    _print_caveats(result["caveats"])


@app.command()
def test(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
    bin_dir: Path = typer.Option(
        None, "--bin-dir", help="Binary directory (overrides TW_BIN_DIR)"
    ),
):
    """Run the self-test against an installed package."""
    descriptor = _load(formula, "test")

    try:
        result = TapworkCore().test(descriptor, bin_dir=bin_dir)
    except TapworkError as e:
        _handle_command_error(e, "test")

    console.print(
        f"[bold green]✓ Self-test passed:[/bold green] found '{result.expected}' "
        f"[dim]({result.duration:.2f}s)[/dim]"
    )


@app.command()
def verify(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
    archive: Path = typer.Argument(..., help="Local artifact to check"),
):
    """Check a local artifact against the declared SHA-256 digest."""
    descriptor = _load(formula, "verify")

    try:
        digest = TapworkCore().verify(descriptor, archive)
    except (TapworkError, OSError) as e:
        _handle_command_error(e, "verify")

    console.print(f"[bold green]✓ Checksum OK:[/bold green] {digest}")


@app.command()
def fetch(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
):
    """Download a package's artifact into the cache without installing it."""
    descriptor = _load(formula, "fetch")

    try:
        path = TapworkCore().fetch(descriptor)
    except TapworkError as e:
        _handle_command_error(e, "fetch")

    console.print(f"[bold green]✓ Downloaded[/bold green] {path}")


@app.command()
def uninstall(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
    bin_dir: Path = typer.Option(
        None, "--bin-dir", help="Binary directory (overrides TW_BIN_DIR)"
    ),
):
    """Remove an installed package's binary."""
    descriptor = _load(formula, "uninstall")

    try:
        removed = TapworkCore().uninstall(descriptor, bin_dir=bin_dir)
    except OSError as e:
        _handle_command_error(e, "uninstall")

    if removed:
        console.print(f"[bold green]✓ Uninstalled[/bold green] {descriptor.name}")
    else:
        console.print(f"[dim]{descriptor.name} is not installed[/dim]")


@app.command()
def info(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
):
    """Show a package's metadata."""
    descriptor = _load(formula, "info")

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Name", descriptor.name)
    table.add_row("Version", descriptor.version)
    table.add_row("Description", descriptor.description)
    table.add_row("Homepage", descriptor.homepage)
    table.add_row("URL", descriptor.url)
    table.add_row("SHA-256", descriptor.sha256)
    table.add_row("License", descriptor.license)
    table.add_row("Binary", descriptor.binary)
    console.print(table)

    if not descriptor.has_valid_digest:
        console.print("[yellow]⚠ SHA-256 is a placeholder; installs will fail[/yellow]")


@app.command()
def caveats(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
):
    """Show a package's post-install caveats."""
    descriptor = _load(formula, "caveats")
    text = descriptor.caveats()
    if text:
        console.print(text.rstrip(), markup=False, highlight=False)
    else:
        console.print(f"[dim]{descriptor.name} has no caveats[/dim]")


@app.command()
def render(
    formula: str = typer.Argument(..., help="Built-in formula name or descriptor file"),
    output: Path = typer.Option(
        None, "--output", "-o", help="Write the formula to a file instead of stdout"
    ),
):
    """Render a package as a Homebrew Ruby formula."""
    descriptor = _load(formula, "render")
    source = render_formula(descriptor)

    if output is None:
        typer.echo(source, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    console.print(f"[bold green]✓ Formula written to[/bold green] {output}")


@app.command()
def version():
    """Show Tapwork version."""
    from . import __version__

    console.print(f"Tapwork version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
