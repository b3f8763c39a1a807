"""
Reporting sinks.
A sink delivers what the tracker produces; the tracker never renders or
transports anything itself. Publications that can be edited in place are
identified by an opaque handle that the sink returns and the tracker keeps.
"""

import json
import uuid
from pathlib import Path
from typing import List, Optional

from loguru import logger

from tracker.core.errors import ReportingError
from tracker.core.models import DailySnapshot, ServerStatus
from .chart import render_hourly_chart
from .formatting import presence_text, render_daily_recap, render_status


class ReportingSink:
    """Delivery interface used by the tracker."""

    def publish_status(self, status: ServerStatus, handle: Optional[str] = None,
                       time_string: Optional[str] = None) -> Optional[str]:
        raise NotImplementedError

    def publish_hourly(self, dataset: List[Optional[float]], day_key: str,
                       handle: Optional[str] = None) -> Optional[str]:
        raise NotImplementedError

    def publish_daily_recap(self, snapshot: DailySnapshot):
        raise NotImplementedError


class FileReportingSink(ReportingSink):
    """Writes summaries, charts and recaps into an output directory."""

    def __init__(self, output_dir: Path, render_charts: bool = True):
        self.output_dir = Path(output_dir)
        self.render_charts = render_charts

    def _target(self, handle: Optional[str], prefix: str, suffix: str) -> Path:
        """Existing artifact for ``handle``, or a new unique path."""
        if handle:
            existing = self.output_dir / handle
            if existing.suffix == suffix and existing.exists():
                return existing
            logger.info(f"Publication {handle} not found, creating a new one")
        return self.output_dir / f"{prefix}-{uuid.uuid4().hex[:8]}{suffix}"

    def publish_status(self, status: ServerStatus, handle: Optional[str] = None,
                       time_string: Optional[str] = None) -> Optional[str]:
        text = render_status(status, time_string)
        text += "\n" + presence_text(status.players_online if status.online else 0)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path = self._target(handle, "status", ".txt")
            path.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            raise ReportingError(f"status summary not written: {e}") from e
        logger.debug(f"Status summary updated ({path.name})")
        return path.name

    def publish_hourly(self, dataset: List[Optional[float]], day_key: str,
                       handle: Optional[str] = None) -> Optional[str]:
        suffix = ".png" if self.render_charts else ".json"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path = self._target(handle, "hourly", suffix)
            if self.render_charts:
                render_hourly_chart(dataset, day_key, path)
            else:
                path.write_text(
                    json.dumps({"day_key": day_key, "hourly_averages": dataset}, indent=2),
                    encoding="utf-8",
                )
        except (OSError, ValueError) as e:
            raise ReportingError(f"hourly chart not published: {e}") from e
        logger.info(f"Hourly dataset for {day_key} published ({path.name})")
        return path.name

    def publish_daily_recap(self, snapshot: DailySnapshot):
        text = render_daily_recap(snapshot)
        path = self.output_dir / f"recap-{snapshot.day_key}.txt"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            raise ReportingError(f"daily recap not written: {e}") from e
        logger.info(f"Daily recap published ({path.name})\n{text}")
