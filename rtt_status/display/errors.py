"""Error and no-match display panels."""

from rich.panel import Panel
from rich.text import Text


def build_error_panel(error: str, dump_path=None) -> Panel:
    """Build an error display panel."""
    content = Text(f"Error: {error}", style="bold red")
    if dump_path:
        content.append(f"\n\nRaw response saved to {dump_path}", style="dim")
    return Panel(
        content,
        title="[bold red]Error[/]",
        border_style="red"
    )


def build_no_match_panel(departs: str, source: str, dest: str) -> Panel:
    """Build the panel shown when no service matches the search."""
    content = Text()
    content.append(f"No {departs} service from {source} to {dest} found.\n\n", style="bold yellow")
    content.append("This could mean:\n", style="white")
    content.append("• No service from this station runs to that destination today\n", style="dim")
    content.append("• The departure time is too far from any booked departure\n", style="dim")
    content.append("• A station code is incorrect\n", style="dim")
    content.append("\nTry a CRS code (e.g. KGX) or a TIPLOC and a 24-hour time like 0830.", style="white")

    return Panel(
        content,
        title="[bold yellow]No Matching Service[/]",
        border_style="yellow"
    )
