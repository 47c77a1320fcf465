"""Additional Information panel."""

from rich.panel import Panel
from rich.text import Text


def build_info_panel(
    seconds_since_update: int | None,
    show_intermediary: bool = True,
    last_error: str | None = None,
) -> Panel:
    content = Text(no_wrap=True, overflow="ellipsis")
    content.append(" Data Sourced From Realtime Trains\n", style="dim")

    content.append(" Controls: [q]uit [i]ntermediate stops ")
    content.append("(shown)" if show_intermediary else "(hidden)", style="dim")
    content.append("\n")

    age = "—" if seconds_since_update is None else f"{seconds_since_update}s"
    content.append(f" Last Update: {age}")

    if last_error:
        content.append(f"\n Refresh failed: {last_error}", style="yellow")

    return Panel(content, title="Additional Information", padding=(0, 0))
