"""Per-stop status lines and the Train Status panel."""

from rich.panel import Panel
from rich.text import Text

from ..config import RESERVED_TRAILING_WIDTH
from ..models import ServiceSnapshot, StopDetail, StopRole, visible_stops

# Stands in for a time column that does not apply to the stop's role
BLANK_TIME = "    "


def stop_style(stop: StopDetail) -> str:
    """
    Style shared by every emphasised span of a stop's line.

    Bold marks times that were actually observed. Red/green mark a late/early
    departure, but only once the departure is actual; an estimate is never
    coloured.
    """
    parts = []
    if stop.is_actual:
        parts.append("bold")

    if stop.departure_actual:
        lateness = stop.departure_lateness or 0
        if lateness > 0:
            parts.append("red")
        elif lateness < 0:
            parts.append("green")

    return " ".join(parts)


def _arrival_lateness(stop: StopDetail) -> str:
    lateness = stop.arrival_lateness or 0
    if stop.role is StopRole.DESTINATION:
        return str(lateness)
    if stop.role is StopRole.CALL:
        return f"{lateness}/"
    return ""


def _departure_lateness(stop: StopDetail) -> str:
    if stop.role in (StopRole.ORIGIN, StopRole.CALL):
        return str(stop.departure_lateness or 0)
    return ""


def _arrival_time(stop: StopDetail) -> str:
    if stop.role in (StopRole.CALL, StopRole.DESTINATION):
        return stop.realtime_arrival or ""
    return BLANK_TIME


def _departure_time(stop: StopDetail) -> str:
    if stop.role in (StopRole.ORIGIN, StopRole.CALL):
        return stop.realtime_departure or ""
    return BLANK_TIME


def render_stop_line(stop: StopDetail, width: int) -> Text:
    """
    Render one stop as a single line `width` columns wide:

        Description [4!] (2/-1) <===          1032 1034

    When the text before the times does not fit, the padding shrinks to
    nothing and the line is left longer than `width`.
    """
    style = stop_style(stop)

    line = Text(no_wrap=True)
    line.append(" ")
    line.append(stop.description, style=style)

    if stop.platform:
        platform = stop.platform
        if stop.platform_changed:
            platform += "!"
        line.append(f" [{platform}] ", style=style)

    line.append("(", style=style)
    line.append(_arrival_lateness(stop), style=style)
    line.append(_departure_lateness(stop), style=style)
    line.append(")", style=style)

    if stop.at_platform:
        line.append(" <===", style=style)

    padding = max(0, width - line.cell_len - RESERVED_TRAILING_WIDTH)
    line.append(" " * padding)

    line.append(_arrival_time(stop), style=style)
    line.append(" ")
    line.append(_departure_time(stop), style=style)

    return line


def build_status_lines(snapshot: ServiceSnapshot, width: int, show_intermediary: bool = True) -> list[Text]:
    return [render_stop_line(stop, width) for stop in visible_stops(snapshot.stops, show_intermediary)]


def build_status_panel(snapshot: ServiceSnapshot, width: int, show_intermediary: bool = True) -> Panel:
    """Build the Train Status panel; `width` is the panel's outer width, borders included."""
    lines = build_status_lines(snapshot, width, show_intermediary)
    content = Text("\n", no_wrap=True, overflow="crop").join(lines)

    title = "Train Status"
    if not show_intermediary:
        title += " [dim](intermediate stops hidden)[/]"

    return Panel(content, title=title, padding=(0, 0))
