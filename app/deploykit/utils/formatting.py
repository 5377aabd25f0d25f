"""Rich console formatting utilities.

Provides consistent user-facing output for the deployment drivers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from deploykit.core.installer import InstallPlan
    from deploykit.models.action import ActionResult

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
        "category": "bold #0e8ac8",
    }
)

console = Console(theme=THEME)
err_console = Console(theme=THEME, stderr=True)


def create_plan_table(plan: InstallPlan, dry_run: bool = False) -> Table:
    """Create a table listing packages in installation order.

    Args:
        plan: Installation plan to display.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table with one row per package.
    """
    title = "Installation Plan (Dry Run)" if dry_run else "Installation Plan"
    table = Table(title=title, show_header=True, header_style="header", border_style="border")
    table.add_column("#", justify="right", style="muted")
    table.add_column("Category", style="category")
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")

    for index, action in enumerate(plan.actions, start=1):
        table.add_row(
            str(index),
            action.category.value,
            escape(action.package),
            escape(action.version or "-"),
        )

    return table


def create_results_table(results: list[ActionResult]) -> Table:
    """Create a table of install outcomes.

    Args:
        results: Results to display, in execution order.

    Returns:
        Rich Table with status, package and message columns.
    """
    table = Table(title="Results", show_header=True, header_style="header", border_style="border")
    table.add_column("Status", width=6, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Message")

    for result in results:
        if result.success:
            status = "[success]OK[/success]"
            message = result.message or ""
        else:
            status = "[error]FAIL[/error]"
            message = result.error or "Unknown error"
        table.add_row(status, escape(result.action.package), f"[muted]{escape(message)}[/muted]")

    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
