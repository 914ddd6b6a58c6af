"""
Cron expression parser for the release scheduler.

Accepts the classic 5-field crontab form and the 6-field form with a leading
seconds field:

    minute hour day month day_of_week
    second minute hour day month day_of_week

Supported tokens per field: '*', '*/n', 'a', 'a,b,c', 'a-b', 'a-b/n'.
'?' is accepted as '*' in the day-of-month and day-of-week fields, and
three-letter month (JAN-DEC) and weekday (SUN-SAT) names are accepted.
When both day fields are restricted, a day matches if either one matches,
as in traditional cron.

Timezones come from the stdlib ``zoneinfo``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class CronParseError(ValueError):
    pass


_MONTH_NAMES = {
    name: i + 1
    for i, name in enumerate(["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"])
}
_DOW_NAMES = {name: i for i, name in enumerate(["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"])}


@dataclass(frozen=True)
class CronSpec:
    seconds: frozenset[int]
    minutes: frozenset[int]
    hours: frozenset[int]
    dom: frozenset[int]  # 1-31
    months: frozenset[int]  # 1-12
    dow: frozenset[int]  # 0-6 (0=Sunday)
    dom_any: bool
    dow_any: bool
    tz: ZoneInfo


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the ZoneInfo for ``name`` (UTC when empty)."""
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CronParseError(f"unknown timezone: {name!r}") from e


def parse_cron(expr: str, *, timezone: str | None = None) -> CronSpec:
    """
    Parse and validate a cron expression.

    Raises:
        CronParseError: If the expression or timezone is invalid
    """
    return _parse_cron(expr, tz=resolve_timezone(timezone))


def next_fire_time_cron(expr: str, *, now: datetime, timezone: str | None = None) -> datetime:
    """
    Compute the first time strictly after ``now`` that matches ``expr``.

    Args:
        expr: Cron expression (e.g. "0 6 * * *" or "0 */5 * * * *")
        now: Reference point; naive values are taken to be in ``timezone``
        timezone: Optional timezone name (e.g. "UTC", "Europe/Amsterdam")

    Returns:
        Aware datetime in the schedule's timezone

    Raises:
        CronParseError: If the expression is invalid or produces no match
    """
    tz = resolve_timezone(timezone) if timezone else (now.tzinfo or ZoneInfo("UTC"))
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    else:
        now = now.astimezone(tz)

    spec = _parse_cron(expr, tz=tz)  # type: ignore[arg-type]
    start = now.replace(microsecond=0) + timedelta(seconds=1)
    return _find_next_match(spec, start)


def upcoming_fire_times(
    expr: str, *, now: datetime, count: int, timezone: str | None = None
) -> list[datetime]:
    """Return the next ``count`` fire times after ``now``."""
    times: list[datetime] = []
    cursor = now
    for _ in range(count):
        cursor = next_fire_time_cron(expr, now=cursor, timezone=timezone)
        times.append(cursor)
    return times


def _find_next_match(spec: CronSpec, cursor: datetime) -> datetime:
    # 370 days covers the leap-year edge while bounding bad specs like "0 0 31 2 *".
    limit = cursor + timedelta(days=370)
    cur = cursor

    while cur <= limit:
        if cur.month not in spec.months:
            cur = _ceil_month(cur, spec)
            continue
        if not _dom_or_dow_match(spec, cur):
            cur = _ceil_day(cur)
            continue
        if cur.hour not in spec.hours:
            cur = _ceil_hour(cur)
            continue
        if cur.minute not in spec.minutes:
            nxt = _next_in(spec.minutes, cur.minute)
            cur = _ceil_hour(cur) if nxt is None else cur.replace(minute=nxt, second=0)
            continue
        if cur.second not in spec.seconds:
            nxt = _next_in(spec.seconds, cur.second)
            cur = _ceil_minute(cur) if nxt is None else cur.replace(second=nxt)
            continue
        return cur

    raise CronParseError("cron expression produced no next fire time within safety window")


def _next_in(values: frozenset[int], current: int) -> int | None:
    return min((v for v in values if v > current), default=None)


def _dom_or_dow_match(spec: CronSpec, dt: datetime) -> bool:
    dom_match = dt.day in spec.dom
    # Python: Monday=0..Sunday=6; cron: Sunday=0..Saturday=6
    cron_dow = (dt.weekday() + 1) % 7
    dow_match = cron_dow in spec.dow

    if spec.dom_any and spec.dow_any:
        return True
    if spec.dom_any:
        return dow_match
    if spec.dow_any:
        return dom_match
    return dom_match or dow_match


def _ceil_month(dt: datetime, spec: CronSpec) -> datetime:
    for _ in range(24):
        if dt.month in spec.months:
            return dt
        dt = (dt.replace(day=1, hour=0, minute=0, second=0) + timedelta(days=32)).replace(day=1)
    return dt


def _ceil_day(dt: datetime) -> datetime:
    return (dt + timedelta(days=1)).replace(hour=0, minute=0, second=0)


def _ceil_hour(dt: datetime) -> datetime:
    return (dt + timedelta(hours=1)).replace(minute=0, second=0)


def _ceil_minute(dt: datetime) -> datetime:
    return (dt + timedelta(minutes=1)).replace(second=0)


def _parse_cron(expr: str, *, tz: ZoneInfo) -> CronSpec:
    parts = [p for p in expr.strip().split() if p]
    if len(parts) == 5:
        parts = ["0", *parts]
    elif len(parts) != 6:
        raise CronParseError(f"cron must have 5 or 6 fields, got {len(parts)}: {expr!r}")

    sec_t, min_t, hour_t, dom_t, month_t, dow_t = parts
    dom_t = "*" if dom_t == "?" else dom_t
    dow_t = "*" if dow_t == "?" else dow_t

    return CronSpec(
        seconds=_parse_field(sec_t, min_v=0, max_v=59),
        minutes=_parse_field(min_t, min_v=0, max_v=59),
        hours=_parse_field(hour_t, min_v=0, max_v=23),
        dom=_parse_field(dom_t, min_v=1, max_v=31),
        months=_parse_field(month_t, min_v=1, max_v=12, names=_MONTH_NAMES),
        dow=_parse_field(dow_t, min_v=0, max_v=6, allow_7_as_0=True, names=_DOW_NAMES),
        dom_any=dom_t == "*",
        dow_any=dow_t == "*",
        tz=tz,
    )


def _to_int(value: str, token: str, names: dict[str, int] | None) -> int:
    value = value.strip()
    if names and value.upper() in names:
        return names[value.upper()]
    if not value.isdigit():
        raise CronParseError(f"invalid value in field: {token!r}")
    return int(value)


def _parse_field(
    token: str,
    *,
    min_v: int,
    max_v: int,
    allow_7_as_0: bool = False,
    names: dict[str, int] | None = None,
) -> frozenset[int]:
    token = token.strip()
    if token == "*":
        return frozenset(range(min_v, max_v + 1))

    values: set[int] = set()
    for part in token.split(","):
        part = part.strip()
        if not part:
            continue
        step = 1
        if "/" in part:
            part, step_s = part.split("/", 1)
            step_s = step_s.strip()
            if not step_s.isdigit() or int(step_s) == 0:
                raise CronParseError(f"invalid step in field: {token!r}")
            step = int(step_s)
            part = part.strip()

        if part == "*":
            values.update(range(min_v, max_v + 1, step))
            continue

        if "-" in part:
            a_s, b_s = part.split("-", 1)
            a = _to_int(a_s, token, names)
            b = _to_int(b_s, token, names)
            # "5-7" in day-of-week means Fri, Sat, Sun
            if allow_7_as_0 and b == 7:
                if a > 7:
                    raise CronParseError(f"range start > end in field: {token!r}")
                values.update(v % 7 for v in range(a, 8, step))
                continue
            if a > b:
                raise CronParseError(f"range start > end in field: {token!r}")
            if a < min_v or b > max_v:
                raise CronParseError(f"range out of bounds in field: {token!r}")
            values.update(range(a, b + 1, step))
            continue

        v = _to_int(part, token, names)
        if allow_7_as_0 and v == 7:
            v = 0
        if v < min_v or v > max_v:
            raise CronParseError(f"value out of bounds in field: {token!r}")
        if step > 1:
            # "a/n" means every n starting at a
            values.update(range(v, max_v + 1, step))
        else:
            values.add(v)

    if not values:
        raise CronParseError(f"empty field: {token!r}")
    return frozenset(values)
