from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo

from dateutil import parser as dateutil_parser

from .abbreviations import lookup_abbreviation
from .errors import UnparseableInputError
from .timezone_utils import as_utc, fixed_offset, lookup_zone, parse_offset, resolve_source_timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedDatetime:
    instant: datetime  # aware, UTC
    source_timezone: str
    assumed_timezone: bool
    inferred_date: bool


def parse_datetime(text: str | None, *, now: datetime | None = None) -> ParsedDatetime:
    """Parse a human-written date/time into an absolute instant.

    - Blank input is the current instant.
    - Input without a timezone is taken as UTC.
    - Missing date fields come from today's (local) date.
    - A trailing timezone (``Europe/Berlin``, ``cest``, ``UTC+3``) is honoured,
      also after a date without a time.
    """

    now = as_utc(now or datetime.now(timezone.utc))
    text = (text or "").strip()

    if not text:
        logger.debug("No datetime provided, using the current instant.")
        return ParsedDatetime(instant=now, source_timezone="UTC", assumed_timezone=True, inferred_date=True)

    body, zone = _split_timezone_suffix(text)

    # Missing fields fall back to today's local date at midnight.
    default = datetime.combine(now.astimezone().date(), time.min)

    try:
        parsed = dateutil_parser.parse(body.upper(), default=default, tzinfos=_tzinfos)
        inferred_date = _uses_default_date(body, parsed, default)

        if zone is not None:
            if parsed.tzinfo is not None:
                raise UnparseableInputError(f"Conflicting timezones in {text!r}")
            parsed = parsed.replace(tzinfo=zone)

        assumed_timezone = parsed.tzinfo is None
        if assumed_timezone:
            parsed = parsed.replace(tzinfo=timezone.utc)

        instant = as_utc(parsed)
    except UnparseableInputError:
        raise
    except (ValueError, OverflowError) as e:
        raise UnparseableInputError(f"Could not parse {text!r}") from e

    if inferred_date:
        logger.debug("Date not provided, assuming today.")
    if assumed_timezone:
        logger.debug("Timezone not provided in %r, assuming UTC.", text)

    source_label = getattr(parsed.tzinfo, "key", None) or parsed.tzname() or "UTC"
    logger.debug("Parsed %r as %s (%s)", text, instant.isoformat(), source_label)

    return ParsedDatetime(
        instant=instant,
        source_timezone=source_label,
        assumed_timezone=assumed_timezone,
        inferred_date=inferred_date,
    )


def _split_timezone_suffix(text: str) -> tuple[str, tzinfo | None]:
    """Detach a trailing timezone that dateutil would misread or miss.

    dateutil inverts the sign of ``UTC+3`` (POSIX rules) and ignores
    abbreviations after a date without a time.
    """

    head, _, tail = text.rpartition(" ")
    head = head.strip()
    if not head:
        return text, None

    if "/" in tail:
        zone = lookup_zone(tail)
        if zone is None:
            return text, None
        logger.debug("Using zone %s from input", zone.key)
        return head, zone

    fixed = parse_offset(tail)
    if fixed is not None:
        logger.debug("Using offset %s from input", fixed.tzname(None))
        return head, fixed

    if tail.isalpha() and lookup_abbreviation(tail) is not None:
        return head, resolve_source_timezone(tail)

    return text, None


def _uses_default_date(body: str, parsed: datetime, default: datetime) -> bool:
    # Parse again against a default on another day; any change means a date field was missing.
    alternate = default.replace(
        year=default.year + 1 if default.year < 9999 else default.year - 1,
        month=default.month % 12 + 1,
        day=2 if default.day == 1 else 1,
    )
    reparsed = dateutil_parser.parse(body.upper(), default=alternate, ignoretz=True)
    return reparsed.date() != parsed.date()


def _tzinfos(name: str | None, offset: int | None) -> tzinfo | None:
    # dateutil calls this for every parse, even when no timezone was found.
    if offset is not None:
        return fixed_offset(timedelta(seconds=offset))
    if name:
        return resolve_source_timezone(name)
    return None
