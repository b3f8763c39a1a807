"""
Text rendering for status summaries and daily recaps.
"""

from typing import Optional

from tracker.core.models import DailySnapshot, ServerStatus


def format_duration(seconds: int) -> str:
    """HH:MM:SS; hours are not wrapped at 24."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def presence_text(players: int) -> str:
    return f"👥 {players} Player{'s' if players != 1 else ''}"


def render_status(status: ServerStatus, time_string: Optional[str] = None) -> str:
    """Human-readable summary of one status check."""
    if not status.online:
        lines = [
            "🔴 Server Offline",
            "The server is currently offline or unreachable.",
            f"Server IP: {status.address}",
        ]
    else:
        lines = [
            f"🟢 {status.motd or 'Minecraft Server'}",
            f"🛡️ Version: {status.version}",
            f"👥 Players: {status.players_online}/{status.players_max}",
            f"📶 Ping: {status.ping}",
            f"📡 Server IP: {status.address}",
            f"🌍 Location: {status.location}",
            f"🖥️ ISP: {status.isp}",
            "🎮 Game Mode:",
        ]
        lines.extend(status.game_modes or ("N/A",))
        if status.icon_url:
            lines.append(f"🖼️ Icon: {status.icon_url}")

    if time_string:
        lines.append(f"Last update: {time_string}")
    return "\n".join(lines)


def render_daily_recap(snapshot: DailySnapshot) -> str:
    return "\n".join([
        f"📊 Daily recap for {snapshot.day_key}",
        f"🟢 Online: {format_duration(snapshot.online_seconds)}",
        f"🔴 Offline: {format_duration(snapshot.offline_seconds)}",
        f"🔁 Came online: {snapshot.to_online}x | Went offline: {snapshot.to_offline}x",
        f"👥 Average players: {snapshot.daily_mean():.1f}",
        f"📈 Peak hourly average: {snapshot.peak_hourly_average():.1f}",
    ])
