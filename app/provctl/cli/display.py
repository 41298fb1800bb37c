"""Shared Rich display functions for results and plans.

Provides reusable table builders and summary printers for the apply and
plan commands.
"""

from rich.table import Table

from provctl.core.plan import Plan
from provctl.models.action import ActionResult
from provctl.utils.formatting import console, print_success


def create_results_table(results: list[ActionResult], dry_run: bool = False) -> Table:
    """Create a Rich table displaying step results.

    Changed steps are styled as added, steps that found their target
    already in place are muted, failures show the error message.

    Args:
        results: List of action results to display.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for results display.
    """
    title = "Planned Actions (Dry Run)" if dry_run else "Results"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Action", width=10)
    table.add_column("Target", no_wrap=True, overflow="ellipsis")
    table.add_column("Message")

    for result in results:
        if result.failed:
            status = "[error]FAIL[/error]"
            message = result.error or "Unknown error"
        elif result.skipped:
            status = "[muted]OK[/muted]"
            message = result.message or ""
        else:
            status = "[added]+[/added]" if dry_run else "[success]DONE[/success]"
            message = result.message or ""

        table.add_row(
            status,
            result.action.action_type.value,
            result.action.target,
            f"[muted]{message}[/muted]",
        )

    return table


def print_results_summary(results: list[ActionResult], dry_run: bool = False) -> None:
    """Print a summary of step results.

    Args:
        results: List of action results.
        dry_run: Whether the results describe a dry run.
    """
    changed = sum(1 for r in results if r.success and r.changed)
    skipped = sum(1 for r in results if r.skipped)

    verb = "would change" if dry_run else "changed"
    console.print(
        f"\nSummary: [added]{changed} {verb}[/added], [muted]{skipped} already satisfied[/muted]"
    )


def create_plan_table(plan: Plan) -> Table:
    """Create a Rich table displaying a plan.

    Args:
        plan: Plan to display.

    Returns:
        Rich Table with one row per catalog entry.
    """
    table = Table(
        title="Plan",
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Category", width=10)
    table.add_column("Name", no_wrap=True)
    table.add_column("Detail", style="muted")

    for entry in plan.entries:
        if entry.present:
            icon = "[present]●[/]"
            name = f"[present]{entry.name}[/]"
        else:
            icon = "[missing]○[/]"
            name = f"[missing]{entry.name}[/]"
        table.add_row(icon, entry.category, name, entry.detail or "")

    return table


def print_plan_summary(plan: Plan) -> None:
    """Print a one-line plan summary."""
    if plan.is_satisfied:
        print_success("Workstation matches the catalog. Nothing to do.")
        return
    console.print(
        f"\nSummary: [missing]{len(plan.missing)} to apply[/missing] "
        f"of {len(plan.entries)} entries"
    )
