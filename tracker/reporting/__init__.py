from .formatting import format_duration, presence_text, render_daily_recap, render_status
from .sink import FileReportingSink, ReportingSink

__all__ = [
    'FileReportingSink',
    'ReportingSink',
    'format_duration',
    'presence_text',
    'render_daily_recap',
    'render_status',
]
