"""
Weekly availability matrix.

A matrix maps a day of the week to a mapping of hour of day to a boolean::

    {"monday": {"18": True, "19": False}, "saturday": {"20": True}}

It is sparse: a missing day or hour means "no answer", not "unavailable".
Hours are serialised as strings so the structure survives a JSON round trip
unchanged. Every function here is pure.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Iterable

import pytz

from squadhub.core.exceptions import ValidationError

DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
WEEKDAYS = DAYS[:5]
WEEKEND = DAYS[5:]
HOURS = range(0, 24)

# The tryout grid shown to prospects: 3 PM to midnight, organisation time.
DISPLAY_HOURS = list(range(15, 24))
EVENING_HOURS = list(range(18, 24))


class Preset(str, Enum):
    ALL = "all"
    CLEAR = "clear"
    EVENINGS = "evenings"
    WEEKENDS = "weekends"
    WEEKDAYS = "weekdays"


def _parse_hour(key: Any) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        hour = key
    elif isinstance(key, str) and key.strip().isascii() and key.strip().isdigit():
        # isdigit() alone accepts "²", which int() rejects
        hour = int(key)
    else:
        return None
    return hour if hour in HOURS else None


def normalize(raw: Any) -> dict[str, dict[str, bool]]:
    """Validate ``raw`` and return it in canonical form.

    Day keys are lower-cased, hour keys become decimal strings, days without
    any hour are dropped and ordering follows ``DAYS`` and ascending hours.
    Raises ``ValidationError`` listing every offending key.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValidationError("Availability must be an object keyed by day")

    errors: dict[str, str] = {}
    parsed: dict[str, dict[int, bool]] = {}

    for day_key, hours in raw.items():
        day = day_key.lower() if isinstance(day_key, str) else day_key
        if day not in DAYS:
            errors[str(day_key)] = "unknown day"
            continue
        if hours is None:
            continue
        if not isinstance(hours, dict):
            errors[day] = "must be an object keyed by hour"
            continue
        for hour_key, value in hours.items():
            hour = _parse_hour(hour_key)
            if hour is None:
                errors[f"{day}.{hour_key}"] = "hour must be between 0 and 23"
                continue
            if not isinstance(value, bool):
                errors[f"{day}.{hour_key}"] = "value must be true or false"
                continue
            parsed.setdefault(day, {})[hour] = value

    if errors:
        raise ValidationError("Invalid availability matrix", errors=errors)

    return {
        day: {str(hour): parsed[day][hour] for hour in sorted(parsed[day])}
        for day in DAYS
        if parsed.get(day)
    }


def iter_leaves(matrix: dict) -> Iterable[tuple[str, str, bool]]:
    for day, hours in (matrix or {}).items():
        for hour, value in (hours or {}).items():
            yield day, str(hour), value


def count_selected(matrix: dict) -> int:
    """Number of ``True`` leaves across all days."""
    return sum(1 for _, _, value in iter_leaves(matrix) if value is True)


def validate(matrix: dict) -> bool:
    """A matrix can be submitted only if at least one slot is selected."""
    return count_selected(matrix) > 0


def has_response(matrix: dict) -> bool:
    # Any stored leaf counts, even False ones and drafts never submitted.
    return any(True for _ in iter_leaves(matrix))


def quick_fill(preset: Preset | str) -> dict[str, dict[str, bool]]:
    """Return a full ``DAYS`` x ``DISPLAY_HOURS`` grid filled per ``preset``."""
    try:
        preset = Preset(preset)
    except ValueError:
        raise ValidationError(f"Unknown preset '{preset}'")

    def selected(day, hour):
        if preset is Preset.ALL:
            return True
        if preset is Preset.CLEAR:
            return False
        if preset is Preset.EVENINGS:
            return hour in EVENING_HOURS
        if preset is Preset.WEEKENDS:
            return day in WEEKEND
        return day in WEEKDAYS

    return {day: {str(hour): selected(day, hour) for hour in DISPLAY_HOURS} for day in DAYS}


def merge_override(base: dict, override: dict) -> dict[str, dict[str, bool]]:
    """Leaf-wise merge: every leaf in ``override`` replaces the one in ``base``.

    Only used to pre-seed entries from a template; submissions always replace
    the whole matrix.
    """
    merged = copy.deepcopy(normalize(base))
    for day, hours in normalize(override).items():
        merged.setdefault(day, {}).update(hours)
    return normalize(merged)


def convert_timezone(matrix: dict, from_tz: str, to_tz: str, on_date: date) -> dict[str, dict[str, bool]]:
    """Shift every leaf from ``from_tz`` to ``to_tz``.

    Offsets are taken on ``on_date`` so daylight saving time is honoured.
    Slots pushed past midnight move to the next day; Sunday wraps to Monday.
    """
    try:
        source = pytz.timezone(from_tz)
        target = pytz.timezone(to_tz)
    except pytz.UnknownTimeZoneError as e:
        raise ValidationError(f"Unknown timezone {e}")

    reference = datetime.combine(on_date, time(12, 0))
    delta = target.localize(reference).utcoffset() - source.localize(reference).utcoffset()
    shift_seconds = int(delta.total_seconds())
    if shift_seconds % 3600:
        raise ValidationError("Only whole-hour timezone differences are supported")
    shift = shift_seconds // 3600

    canonical = normalize(matrix)
    if shift == 0:
        return canonical

    shifted: dict[str, dict[str, bool]] = {}
    for day, hour, value in iter_leaves(canonical):
        absolute = DAYS.index(day) * 24 + int(hour) + shift
        new_day = DAYS[(absolute // 24) % len(DAYS)]
        shifted.setdefault(new_day, {})[str(absolute % 24)] = value
    return normalize(shifted)


@dataclass
class AvailabilitySummary:
    total: int = 0
    responded_count: int = 0
    pending_count: int = 0
    submitted_count: int = 0
    heatmap: dict[str, dict[str, int]] = field(default_factory=dict)
    players_by_slot: dict[str, dict[str, list[str]]] = field(default_factory=dict)

    def as_dict(self):
        return {
            "total": self.total,
            "responded_count": self.responded_count,
            "pending_count": self.pending_count,
            "submitted_count": self.submitted_count,
            "heatmap": self.heatmap,
            "players_by_slot": self.players_by_slot,
        }


def _entry_name(entry) -> str:
    prospect = getattr(entry, "prospect", None)
    if prospect is None:
        return "Unknown Player"
    return getattr(prospect, "display_name", None) or "Unknown Player"


def aggregate(entries: Iterable) -> AvailabilitySummary:
    """Summarise availability entries for staff views.

    An entry counts as responded when its matrix holds any leaf, whether or
    not it was formally submitted. The heatmap always covers the display grid
    and grows to include any other hour someone selected.
    """
    summary = AvailabilitySummary(
        heatmap={day: {str(hour): 0 for hour in DISPLAY_HOURS} for day in DAYS},
    )

    for entry in entries:
        summary.total += 1
        matrix = entry.time_slots or {}
        if getattr(entry, "submitted_at", None) is not None:
            summary.submitted_count += 1
        if has_response(matrix):
            summary.responded_count += 1
        else:
            summary.pending_count += 1

        name = None
        for day, hour, value in iter_leaves(matrix):
            if value is not True or day not in summary.heatmap:
                continue
            summary.heatmap[day][hour] = summary.heatmap[day].get(hour, 0) + 1
            if name is None:
                name = _entry_name(entry)
            summary.players_by_slot.setdefault(day, {}).setdefault(hour, []).append(name)

    for day in DAYS:
        summary.heatmap[day] = dict(sorted(summary.heatmap[day].items(), key=lambda kv: int(kv[0])))

    return summary
