"""
Monitoring Utilities
Runtime counters for messages, commands and errors
"""

import math
import time
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple


class Monitoring:
    """Counters for the running bot, reported on /health."""

    def __init__(self, client: Any = None):
        self.client = client
        self.start_time = time.time()
        self.metrics = {
            "messagesProcessed": 0,
            "commandsExecuted": 0,
            "errors": 0,
        }
        # Invocations per canonical command name
        self.command_usage: Counter = Counter()

    def record_message(self) -> None:
        """Record a message seen by the router."""
        self.metrics["messagesProcessed"] += 1

    def record_command(self, name: Optional[str] = None) -> None:
        """Record a command run, by canonical name when given."""
        self.metrics["commandsExecuted"] += 1
        if name:
            self.command_usage[name] += 1

    def record_error(self) -> None:
        self.metrics["errors"] += 1

    def uptime_seconds(self) -> int:
        return int(time.time() - self.start_time)

    def top_commands(self, limit: int = 5) -> List[Tuple[str, int]]:
        """Most used commands, most used first."""
        return self.command_usage.most_common(limit)

    def get_discord_metrics(self) -> Dict[str, Any]:
        """
        Get Discord client metrics.

        Returns:
            Dict with ready state, latency in ms and guild count
        """
        client = self.client
        is_ready = getattr(client, "is_ready", None)
        latency = getattr(client, "latency", 0.0) or 0.0
        return {
            "ready": bool(is_ready()) if callable(is_ready) else False,
            # latency is nan or inf before the first heartbeat
            "ping": latency * 1000 if math.isfinite(latency) else 0.0,
            "guilds": len(getattr(client, "guilds", None) or []),
        }

    def get_app_metrics(self) -> Dict[str, Any]:
        """Get counters, usage and uptime."""
        hours = self.uptime_seconds() / 3600
        return {
            **self.metrics,
            "commandsPerHour": round(self.metrics["commandsExecuted"] / hours) if hours >= 1 else None,
            "topCommands": dict(self.top_commands()),
            "uptime": self.format_duration(self.uptime_seconds()),
        }

    def format_health_status(self) -> str:
        """
        Format a short status report, logged on shutdown.

        Returns:
            Multi-line status string
        """
        discord = self.get_discord_metrics()
        app = self.get_app_metrics()

        lines = [
            f"Prism status: {'READY' if discord['ready'] else 'STARTING'}",
            f"Ping: {discord['ping']:.0f}ms | Guilds: {discord['guilds']}",
            f"Messages: {app['messagesProcessed']} | Commands: {app['commandsExecuted']} | Errors: {app['errors']}",
        ]
        if app["topCommands"]:
            usage = ", ".join(f"!{name} x{count}" for name, count in app["topCommands"].items())
            lines.append(f"Top commands: {usage}")
        lines.append(f"Uptime: {app['uptime']}")

        return "\n".join(lines)

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Example:
            ``3661`` becomes ``"1h 1m 1s"``
        """
        minutes, secs = divmod(seconds, 60)
        hours, mins = divmod(minutes, 60)
        days, hours = divmod(hours, 24)

        parts = [f"{value}{unit}" for value, unit in ((days, "d"), (hours, "h"), (mins, "m"), (secs, "s")) if value]
        return " ".join(parts) or "0s"
