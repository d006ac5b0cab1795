from __future__ import annotations

from dataclasses import dataclass
from datetime import MAXYEAR, datetime, timezone

from minion.errors import ParseError

# Tried in order; the first format that parses wins.
ACCEPTED_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d",
)
OUTPUT_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
HARD_CEILING = datetime(2099, 12, 31, tzinfo=timezone.utc)
LATEST_REPRESENTABLE = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Extension:
    value: str
    changed: bool


def parse_expiration(value: str) -> datetime:
    raw = (value or "").strip()
    for fmt in ACCEPTED_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    raise ParseError(f"Unrecognized expiration date: {value!r}")


def format_expiration(value: datetime) -> str:
    # Millisecond precision, as the console writes it.
    return value.astimezone(timezone.utc).strftime(OUTPUT_FORMAT)[:-3]


def add_years(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # 29 February in a target year without a leap day rolls over to 1 March.
        return value.replace(year=value.year + years, month=3, day=1)


def ceiling_for(reference: datetime, years: int, hard_ceiling: datetime | None) -> datetime:
    target_year = reference.year + years
    # Clamp before building the date; the target year may not be representable.
    if hard_ceiling is not None and target_year > hard_ceiling.year:
        return hard_ceiling
    if target_year > MAXYEAR:
        return LATEST_REPRESENTABLE

    ceiling = add_years(reference, years)
    if hard_ceiling is not None and ceiling > hard_ceiling:
        return hard_ceiling
    return ceiling


def extend_expiration(
    current: str,
    years: int,
    *,
    now: datetime | None = None,
    hard_ceiling: datetime | None = HARD_CEILING,
) -> Extension:
    if years < 1:
        raise ValueError(f"Extension years must be positive, got {years}")

    parsed = parse_expiration(current)
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    try:
        ceiling = ceiling_for(reference, years, hard_ceiling)
    except (ValueError, OverflowError) as exc:
        raise ParseError(f"Cannot compute ceiling for {years} years from {reference.isoformat()}: {exc}") from exc
    # Compare at the written precision so a value we produced is never extended again.
    ceiling = ceiling.replace(microsecond=ceiling.microsecond // 1000 * 1000)

    if parsed >= ceiling:
        return Extension(value=current, changed=False)
    return Extension(value=format_expiration(ceiling), changed=True)
