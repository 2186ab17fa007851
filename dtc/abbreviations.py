from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimezoneAbbreviation:
    abbreviation: str
    offset: timedelta
    zone: str


# Abbreviations shared by several zones resolve to the conventional one.
PREFERRED_ZONES: dict[str, str] = {
    "GMT": "Etc/GMT",
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "AKST": "America/Anchorage",
    "AKDT": "America/Anchorage",
    "HST": "Pacific/Honolulu",
    "AST": "America/Halifax",
    "ADT": "America/Halifax",
    "BST": "Europe/London",
    "IST": "Asia/Kolkata",
    "WET": "Europe/Lisbon",
    "WEST": "Europe/Lisbon",
    "CET": "Europe/Berlin",
    "CEST": "Europe/Berlin",
    "EET": "Europe/Athens",
    "EEST": "Europe/Athens",
    "MSK": "Europe/Moscow",
    "SAST": "Africa/Johannesburg",
    "PKT": "Asia/Karachi",
    "HKT": "Asia/Hong_Kong",
    "JST": "Asia/Tokyo",
    "KST": "Asia/Seoul",
    "AEST": "Australia/Sydney",
    "AEDT": "Australia/Sydney",
    "NZST": "Pacific/Auckland",
    "NZDT": "Pacific/Auckland",
}

_UTC_ALIASES = ("UTC", "GMT", "Z")
_LEGACY_PREFIXES = ("Etc/", "US/", "Canada/", "Mexico/", "Brazil/", "Chile/", "SystemV/")
_ALPHA_RE = re.compile(r"^[A-Za-z]+$")


def lookup_abbreviation(name: str | None) -> TimezoneAbbreviation | None:
    key = (name or "").strip().lower()
    if not key:
        return None
    return abbreviation_table().get(key)


@lru_cache(maxsize=1)
def abbreviation_table() -> dict[str, TimezoneAbbreviation]:
    """Map lower-cased abbreviations to the offset they denote.

    Every zone is sampled in mid-January and mid-July of the current year so
    both the standard and the daylight-saving names are collected.
    """

    return build_abbreviation_table(datetime.now(timezone.utc))


def build_abbreviation_table(now: datetime) -> dict[str, TimezoneAbbreviation]:
    samples = [
        datetime(now.year, 1, 15, 12, tzinfo=timezone.utc),
        datetime(now.year, 7, 15, 12, tzinfo=timezone.utc),
    ]

    table: dict[str, TimezoneAbbreviation] = {}
    for zone_name in sorted(available_timezones(), key=_zone_rank):
        try:
            zone = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Skipping unloadable zone %s", zone_name)
            continue

        for sample in samples:
            local = sample.astimezone(zone)
            abbr = local.tzname()
            offset = local.utcoffset()
            if not abbr or offset is None or not _ALPHA_RE.match(abbr):
                continue

            key = abbr.lower()
            if key not in table or PREFERRED_ZONES.get(abbr.upper()) == zone_name:
                table[key] = TimezoneAbbreviation(abbreviation=abbr.upper(), offset=offset, zone=zone_name)

    for alias in _UTC_ALIASES:
        zone_name = "Etc/GMT" if alias == "GMT" else "UTC"
        table[alias.lower()] = TimezoneAbbreviation(abbreviation=alias, offset=timedelta(0), zone=zone_name)

    logger.debug("Built abbreviation table with %d entries", len(table))
    return table


def _zone_rank(zone_name: str) -> tuple[int, str]:
    # Regional zones first, then Etc/ and legacy aliases like "Japan" or "US/Pacific".
    if "/" in zone_name and not zone_name.startswith(_LEGACY_PREFIXES):
        return (0, zone_name)
    return (1, zone_name)
