"""Built-in tools shipped with the server."""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable
from zoneinfo import ZoneInfo

from toolchat_server.tools.types import ToolDefinition, ToolParameter, ToolProvider, ToolSpec


class ServerToolProvider(ToolProvider):
    """Provides clock and server status tools.

    Attributes:
        server_name: Name reported by getServerInfo
        version: Version reported by getServerInfo
    """

    def __init__(
        self,
        server_name: str,
        version: str,
        tool_count: Callable[[], int] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.server_name = server_name
        self.version = version
        self._tool_count = tool_count
        self._clock = clock
        self._started_at = clock()

    @property
    def provider_name(self) -> str:
        return "server"

    def get_current_time(self, timezone_name: str | None = None) -> dict[str, Any]:
        tz = ZoneInfo(timezone_name) if timezone_name else timezone.utc
        now = datetime.now(tz)
        return {
            "iso": now.isoformat(),
            "timezone": timezone_name or "UTC",
            "weekday": now.strftime("%A"),
        }

    def get_server_info(self) -> dict[str, Any]:
        uptime_seconds = int(self._clock() - self._started_at)
        hours, remainder = divmod(uptime_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        info: dict[str, Any] = {
            "name": self.server_name,
            "version": self.version,
            "uptime": f"{hours}h {minutes}m {seconds}s",
            "uptimeSeconds": uptime_seconds,
        }
        if self._tool_count is not None:
            info["toolCount"] = self._tool_count()
        return info

    def tool_specs(self) -> Iterable[ToolSpec]:
        def current_time(timezone: str | None = None) -> dict[str, Any]:
            return self.get_current_time(timezone)

        return [
            ToolSpec(
                ToolDefinition(
                    name="getCurrentTime",
                    description=(
                        "Returns the current date and time. "
                        "Use it whenever the user asks about today's date or the time."
                    ),
                    parameters=(
                        ToolParameter(
                            name="timezone",
                            type="string",
                            description="IANA time zone name such as Europe/Berlin (default: UTC)",
                        ),
                    ),
                ),
                current_time,
            ),
            ToolSpec(
                ToolDefinition(
                    name="getServerInfo",
                    description=(
                        "Returns the server name, version, uptime and number of available tools."
                    ),
                ),
                self.get_server_info,
            ),
        ]
