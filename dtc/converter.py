from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from .errors import UnparseableInputError
from .parsing import ParsedDatetime, parse_datetime
from .settings import Settings
from .timezone_utils import format_in_timezone, resolve_timezone, to_timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversion:
    parsed: ParsedDatetime
    converted: datetime
    rendered: str


def convert(text: str | None, settings: Settings, *, now: datetime | None = None) -> Conversion:
    """Parse ``text`` and render the instant in the configured target timezone."""

    # Resolve the target first so an unknown timezone fails before any parsing work.
    target = resolve_timezone(settings.target_timezone)
    parsed = parse_datetime(text, now=now)

    try:
        converted = to_timezone(parsed.instant, target)
        rendered = format_in_timezone(parsed.instant, target, fmt=settings.output_format)
    except OverflowError as e:
        raise UnparseableInputError(f"{parsed.instant.isoformat()} is out of range in {settings.target_timezone}") from e
    logger.debug("Converted %s from %s to %s", parsed.instant.isoformat(), parsed.source_timezone, rendered)

    return Conversion(parsed=parsed, converted=converted, rendered=rendered)
