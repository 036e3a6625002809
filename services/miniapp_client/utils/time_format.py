"""Relative time labels for post and comment timestamps."""

from __future__ import annotations

from datetime import datetime, timezone

MINUTE_MS = 60_000
HOUR_MS = 3_600_000
DAY_MS = 86_400_000
MONTH_MS = 30 * DAY_MS


def parse_timestamp(value: int | float | str | datetime) -> datetime:
    """Accept epoch milliseconds, ISO-8601 strings or datetimes; return aware UTC."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, (int, float)):
        moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        text = value.strip()
        if text.lstrip("-").isdigit():
            return parse_timestamp(int(text))
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_relative_time(
    value: int | float | str | datetime | None, now: datetime | None = None
) -> str:
    """Format a timestamp as 刚刚 / N分钟前 / N小时前 / N天前 / MM-DD / YYYY-MM-DD."""
    if value is None or value == "":
        return ""

    try:
        moment = parse_timestamp(value)
    except (ValueError, TypeError, AttributeError, OverflowError, OSError):
        # Unparseable server timestamps render as no label
        return ""
    current = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    diff_ms = (current - moment).total_seconds() * 1000

    if diff_ms < MINUTE_MS:
        return "刚刚"
    if diff_ms < HOUR_MS:
        return f"{int(diff_ms // MINUTE_MS)}分钟前"
    if diff_ms < DAY_MS:
        return f"{int(diff_ms // HOUR_MS)}小时前"
    if diff_ms < MONTH_MS:
        return f"{int(diff_ms // DAY_MS)}天前"

    local = moment.astimezone()
    if local.year == current.astimezone().year:
        return f"{local:%m-%d}"
    return f"{local:%Y-%m-%d}"
