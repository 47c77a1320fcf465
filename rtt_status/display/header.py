"""Train Info panel."""

from rich.panel import Panel
from rich.text import Text

from ..models import ServiceSnapshot


def _describe(stops) -> str:
    return " & ".join(s.description for s in stops) or "—"


def build_train_info_panel(snapshot: ServiceSnapshot) -> Panel:
    """Operator on the first line, then `<time> <origin> to <destination>`."""
    content = Text(no_wrap=True, overflow="ellipsis")
    content.append(f" {snapshot.operator}", style="bold cyan")
    if snapshot.train_identity:
        content.append(f" ({snapshot.train_identity})", style="dim")
    content.append("\n")

    departs = snapshot.origin[0].public_time if snapshot.origin else ""
    content.append(f" {departs} ", style="bold")
    content.append(f"{_describe(snapshot.origin)} to {_describe(snapshot.destination)}")

    return Panel(content, title="Train Info", padding=(0, 0))
