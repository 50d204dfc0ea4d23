"""
Attendance counting and date matching.

Candidate dates, available dates and confirmed dates are compared by
calendar day in the organizer's time zone, so 09:00 and 21:00 on the same
day are the same date. Values may be datetimes, dates or the ISO strings
they are stored as.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils.dateparse import parse_date, parse_datetime

from apps.schedules.models import AttendanceStatus


def organizer_time_zone() -> ZoneInfo:
    return ZoneInfo(settings.KANJY_ORGANIZER_TIME_ZONE)


def to_organizer_datetime(value) -> Optional[datetime]:
    """
    Convert a timestamp-like value to an aware datetime in the organizer zone.

    Naive datetimes are taken as organizer wall-clock time and plain dates
    as midnight. Returns None for None or unparsable strings.
    """
    tz = organizer_time_zone()

    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        try:
            parsed = parse_datetime(value) or parse_date(value)
        except ValueError:
            return None
        if parsed is None:
            return None
        value = parsed

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)

    return None


def to_organizer_date(value) -> Optional[date]:
    """Calendar day of a timestamp-like value in the organizer zone."""
    converted = to_organizer_datetime(value)
    return converted.date() if converted is not None else None


def is_same_day(a, b) -> bool:
    """True when both values fall on the same organizer calendar day."""
    day_a = to_organizer_date(a)
    if day_a is None:
        return False
    return day_a == to_organizer_date(b)


def contains_day(dates: Iterable, day) -> bool:
    """True when any entry of dates is on the same day as day."""
    target = to_organizer_date(day)
    if target is None:
        return False
    return any(to_organizer_date(value) == target for value in dates or [])


def count_available_on(responses: Iterable, day) -> int:
    """Number of responses listing day among their available dates."""
    return sum(1 for response in responses if contains_day(response.available_dates, day))


def count_maybe_on(responses: Iterable, day) -> int:
    """Number of responses listing day among their maybe dates."""
    return sum(1 for response in responses if contains_day(response.maybe_dates, day))


def sort_dates(dates: Iterable) -> list:
    """Return parsable dates in chronological order; unparsable ones are dropped."""
    valid = [value for value in dates or [] if to_organizer_datetime(value) is not None]
    return sorted(valid, key=to_organizer_datetime)


def optimal_date(candidate_dates: Iterable, responses: Iterable):
    """
    Return the candidate with the most available responses.

    Candidates are scanned in chronological order and the earliest one wins
    a tie. Returns None when there are no candidates.
    """
    responses = list(responses)

    best = None
    best_count = -1
    for candidate in sort_dates(candidate_dates):
        count = count_available_on(responses, candidate)
        if count > best_count:
            best = candidate
            best_count = count
    return best


def event_statistics(responses: Iterable) -> dict:
    """Response counts per attendance status and in total."""
    counts = {choice: 0 for choice in AttendanceStatus.values}
    total = 0
    for response in responses:
        total += 1
        if response.status in counts:
            counts[response.status] += 1

    return {
        'total_responses': total,
        'attending_count': counts[AttendanceStatus.ATTENDING],
        'maybe_count': counts[AttendanceStatus.MAYBE],
        'not_attending_count': counts[AttendanceStatus.NOT_ATTENDING],
        'undecided_count': counts[AttendanceStatus.UNDECIDED],
    }


def date_statistics(candidate_dates: Iterable, responses: Iterable) -> list:
    """
    Per-candidate available and maybe counts.

    Sorted by available count, highest first; candidates with equal counts
    stay in chronological order.
    """
    responses = list(responses)

    rows = [
        {
            'date': candidate,
            'available_count': count_available_on(responses, candidate),
            'maybe_count': count_maybe_on(responses, candidate),
        }
        for candidate in sort_dates(candidate_dates)
    ]
    return sorted(rows, key=lambda row: row['available_count'], reverse=True)
