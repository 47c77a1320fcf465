"""Display rendering components for rtt-status."""

from .header import build_train_info_panel
from .stations import build_status_lines, build_status_panel, render_stop_line
from .footer import build_info_panel
from .errors import build_error_panel, build_no_match_panel

__all__ = [
    "build_train_info_panel",
    "build_status_lines",
    "build_status_panel",
    "render_stop_line",
    "build_info_panel",
    "build_error_panel",
    "build_no_match_panel",
]
