"""Time tool - current time, timezone conversion and timestamp formatting."""

from datetime import datetime, time as dtime, UTC
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field

from tool_host.core.base import MethodDefinition

DEFAULT_TIMEZONE = "Etc/UTC"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA timezone name.

    Raises:
        ValueError: If the name is not a known timezone
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Invalid timezone: {name}") from None


def to_iso(moment: datetime) -> str:
    """UTC ISO-8601 string with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimeTool:
    """Timezone-aware time utilities."""

    name: str = "time"
    version: str = "1.0.0"
    description: str = (
        "Time tool providing current time retrieval, timezone conversion, "
        "and time formatting"
    )

    def __init__(self) -> None:
        self._methods = self._build_methods()

    def get_methods(self) -> list[MethodDefinition]:
        return list(self._methods)

    def _build_methods(self) -> list[MethodDefinition]:
        return [
            MethodDefinition(
                name="get_current_time",
                description="Get current time in a specific timezone",
                input_schema={
                    "timezone": (str, Field(
                        default=DEFAULT_TIMEZONE,
                        description=(
                            'IANA timezone name (e.g., "America/New_York", '
                            '"Europe/London"). Defaults to "Etc/UTC"'
                        ),
                    )),
                },
                handler=self.get_current_time,
            ),
            MethodDefinition(
                name="convert_time",
                description="Convert time between timezones",
                input_schema={
                    "source_timezone": (str, Field(
                        description='Source IANA timezone name (e.g., "America/New_York")',
                    )),
                    "target_timezone": (str, Field(
                        description='Target IANA timezone name (e.g., "Europe/London")',
                    )),
                    "time": (str, Field(
                        pattern=r"^\d{2}:\d{2}$",
                        description="Time in 24-hour format (HH:MM)",
                    )),
                },
                handler=self.convert_time,
            ),
            MethodDefinition(
                name="format_time",
                description=(
                    "Convert timestamp to formatted datetime string "
                    "(YYYY-MM-DD HH:MM:SS)"
                ),
                input_schema={
                    "timestamp": (float, Field(
                        description="Unix timestamp in milliseconds",
                    )),
                    "timezone": (str, Field(
                        default=DEFAULT_TIMEZONE,
                        description=(
                            'IANA timezone name (e.g., "Asia/Shanghai"). '
                            'Defaults to "Etc/UTC"'
                        ),
                    )),
                },
                handler=self.format_time,
            ),
        ]

    async def get_current_time(self, params: dict) -> dict:
        timezone = params["timezone"]
        zone = get_zone(timezone)
        now = datetime.now(UTC)
        return {
            "timezone": timezone,
            "datetime": now.astimezone(zone).strftime(DATETIME_FORMAT),
            "iso": to_iso(now),
            "timestamp": int(now.timestamp() * 1000),
        }

    async def convert_time(self, params: dict) -> dict:
        hours, minutes = (int(part) for part in params["time"].split(":"))
        if hours > 23 or minutes > 59:
            raise ValueError("Invalid time value")

        source = get_zone(params["source_timezone"])
        target = get_zone(params["target_timezone"])

        # The wall-clock time is taken on today's date in the source zone
        today = datetime.now(source).date()
        source_moment = datetime.combine(today, dtime(hours, minutes), tzinfo=source)
        target_moment = source_moment.astimezone(target)

        return {
            "source": {
                "timezone": params["source_timezone"],
                "time": params["time"],
                "date": today.isoformat(),
            },
            "target": {
                "timezone": params["target_timezone"],
                "time": target_moment.strftime("%H:%M"),
                "date": target_moment.date().isoformat(),
            },
        }

    async def format_time(self, params: dict) -> dict:
        timestamp = params["timestamp"]
        timezone = params["timezone"]
        try:
            moment = datetime.fromtimestamp(timestamp / 1000, UTC)
        except (OverflowError, OSError, ValueError):
            raise ValueError("Invalid timestamp") from None

        zone = get_zone(timezone)
        return {
            "timestamp": timestamp,
            "timezone": timezone,
            "formatted": moment.astimezone(zone).strftime(DATETIME_FORMAT),
            "iso": to_iso(moment),
        }

    async def health_check(self) -> bool:
        """Verify timezone data is available."""
        try:
            ZoneInfo(DEFAULT_TIMEZONE)
        except ZoneInfoNotFoundError:
            return False
        return True


tool = TimeTool()
