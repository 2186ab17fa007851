from __future__ import annotations

from dataclasses import dataclass

from .timezone_utils import DEFAULT_FORMAT, normalize_timezone_name


@dataclass(frozen=True)
class Settings:
    target_timezone: str
    output_format: str
    verbose: bool


def get_settings(
    *,
    target_timezone: str | None = None,
    output_format: str | None = None,
    verbose: bool = False,
) -> Settings:
    # Everything comes from the command line; there are no config files or env vars.
    fmt = DEFAULT_FORMAT if output_format is None else output_format
    if not fmt.strip():
        raise ValueError("Output format cannot be empty.")

    return Settings(
        target_timezone=normalize_timezone_name(target_timezone),
        output_format=fmt,
        verbose=verbose,
    )
