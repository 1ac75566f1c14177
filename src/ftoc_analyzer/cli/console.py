"""Rich console configuration for CLI output."""

from rich.console import Console
from rich.theme import Theme

from ftoc_analyzer.core.models.enums import Severity

# Custom theme for FTOC Analyzer
THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red bold",
        "success": "green",
        "highlight": "magenta",
        "muted": "dim",
        "header": "bold blue",
        "value": "bold",
        "tag": "magenta",
        "severity_error": "red bold",
        "severity_warning": "yellow",
        "severity_info": "cyan",
    }
)

# Global console instance
console = Console(theme=THEME)

# Diagnostics go to stderr so reports on stdout stay machine-readable
err_console = Console(theme=THEME, stderr=True)


def severity_style(severity: Severity) -> str:
    """Theme style name for a severity."""
    return f"severity_{severity.value}"


def print_error(message: str) -> None:
    """Print error message."""
    err_console.print(f"[error]Error:[/error] {message}")


def print_warning(message: str) -> None:
    """Print warning message."""
    err_console.print(f"[warning]Warning:[/warning] {message}")


def print_success(message: str) -> None:
    """Print success message."""
    err_console.print(f"[success]{message}[/success]")
