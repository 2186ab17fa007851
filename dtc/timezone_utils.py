from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, available_timezones

from .abbreviations import lookup_abbreviation
from .errors import UnparseableInputError

logger = logging.getLogger(__name__)


DEFAULT_TIMEZONE = "UTC"
DEFAULT_FORMAT = "%Y-%m-%d %H:%M:%S"

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$", re.IGNORECASE)


def normalize_timezone_name(tz_name: str | None) -> str:
    tz_name = (tz_name or "").strip()
    return tz_name or DEFAULT_TIMEZONE


def resolve_timezone(tz_name: str | None) -> tzinfo:
    """Resolve a target timezone for rendering.

    Accepts numeric offsets, abbreviations and IANA names (any case). An
    abbreviation resolves to the zone it belongs to, so rendering follows that
    zone's daylight-saving rules. Abbreviations win over legacy IANA keys of
    the same spelling (EST, MST, HST).
    """

    name = normalize_timezone_name(tz_name)

    fixed = parse_offset(name)
    if fixed is not None:
        return fixed

    abbr = lookup_abbreviation(name)
    if abbr is not None:
        logger.debug("Timezone %r resolved to zone %s", name, abbr.zone)
        return ZoneInfo(abbr.zone)

    zone = lookup_zone(name)
    if zone is not None:
        return zone

    raise UnparseableInputError(f"Unknown timezone: {name}")


def resolve_source_timezone(tz_name: str | None) -> tzinfo:
    """Resolve a timezone written inside an input datetime string.

    Abbreviations denote a fixed offset here (CEST is always +02:00), so the
    input is interpreted exactly as written.
    """

    name = normalize_timezone_name(tz_name)

    fixed = parse_offset(name)
    if fixed is not None:
        return fixed

    abbr = lookup_abbreviation(name)
    if abbr is not None:
        logger.debug("Abbreviation %s is UTC%s (%s)", abbr.abbreviation, offset_label(abbr.offset), abbr.zone)
        if not abbr.offset:
            return timezone.utc
        return timezone(abbr.offset, abbr.abbreviation)

    zone = lookup_zone(name)
    if zone is not None:
        return zone

    raise UnparseableInputError(f"Unknown timezone: {name}")


def parse_offset(value: str) -> tzinfo | None:
    m = _OFFSET_RE.match(value.strip())
    if not m:
        return None

    hours = int(m.group("hours"))
    minutes = int(m.group("minutes") or 0)
    if hours > 23 or minutes > 59:
        raise UnparseableInputError(f"Invalid UTC offset: {value}")

    offset = timedelta(hours=hours, minutes=minutes)
    if m.group("sign") == "-":
        offset = -offset
    return fixed_offset(offset)


def fixed_offset(offset: timedelta) -> tzinfo:
    if not offset:
        return timezone.utc
    # Named "+05:30" rather than "UTC+05:30" so rendered output parses back unchanged.
    return timezone(offset, offset_label(offset))


def offset_label(offset: timedelta) -> str:
    total = int(offset.total_seconds())
    sign = "-" if total < 0 else "+"
    hours, rest = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}:{rest // 60:02d}"


def lookup_zone(tz_name: str) -> ZoneInfo | None:
    key = _zone_keys().get(tz_name.strip().lower())
    if key is None:
        return None
    return ZoneInfo(key)


@lru_cache(maxsize=1)
def _zone_keys() -> dict[str, str]:
    return {key.lower(): key for key in available_timezones()}


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_timezone(dt: datetime, tz: tzinfo | str | None) -> datetime:
    zone = tz if isinstance(tz, tzinfo) else resolve_timezone(tz)
    return as_utc(dt).astimezone(zone)


def format_in_timezone(dt: datetime, tz: tzinfo | str | None, *, fmt: str = DEFAULT_FORMAT) -> str:
    local = to_timezone(dt, tz)
    return f"{local.strftime(fmt)} {timezone_label(local)}"


def timezone_label(local: datetime) -> str:
    """Name the offset of ``local`` so the rendered text parses back to the same instant.

    Abbreviations that read back as a different offset (Dublin's IST, Havana's
    CDT) are replaced by the numeric offset.
    """

    label = local.tzname() or DEFAULT_TIMEZONE
    offset = local.utcoffset()
    if offset is None or not label.isalpha():
        return label

    abbr = lookup_abbreviation(label)
    if abbr is None or abbr.offset != offset:
        return offset_label(offset)
    return label
