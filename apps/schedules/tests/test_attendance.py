"""Date matching and counting; no database needed."""

from datetime import date, datetime, timezone as dt_timezone

from apps.schedules.models import ScheduleResponse, AttendanceStatus
from apps.schedules.services import (
    is_same_day,
    to_organizer_date,
    count_available_on,
    count_maybe_on,
    optimal_date,
    event_statistics,
    date_statistics,
)


def make_response(name='A', available=(), maybe=(), status=AttendanceStatus.ATTENDING):
    return ScheduleResponse(
        participant_name=name,
        available_dates=list(available),
        maybe_dates=list(maybe),
        status=status,
    )


class TestIsSameDay:

    def test_morning_and_night_match_midnight(self):
        assert is_same_day('2024-01-15T09:00:00', '2024-01-15T00:00:00')
        assert is_same_day('2024-01-15T21:00:00', '2024-01-15T00:00:00')

    def test_different_days(self):
        assert not is_same_day('2024-01-15T23:59:00', '2024-01-16T00:00:00')

    def test_aware_values_use_organizer_zone(self):
        # 16:00 UTC on the 15th is 01:00 on the 16th in Tokyo
        utc_value = datetime(2024, 1, 15, 16, 0, tzinfo=dt_timezone.utc)

        assert is_same_day(utc_value, date(2024, 1, 16))
        assert not is_same_day(utc_value, date(2024, 1, 15))

    def test_naive_values_are_wall_clock(self):
        assert is_same_day(datetime(2024, 1, 15, 23, 30), '2024-01-15T00:00:00+09:00')

    def test_unparsable_values_never_match(self):
        assert not is_same_day('not a date', 'not a date')
        assert not is_same_day(None, None)

    def test_to_organizer_date_from_string(self):
        assert to_organizer_date('2024-01-15T19:00:00+09:00') == date(2024, 1, 15)
        assert to_organizer_date('2024-01-15') == date(2024, 1, 15)


class TestCounts:

    def test_count_available_ignores_status(self):
        responses = [
            make_response('A', available=['2024-01-15T19:00:00+09:00']),
            make_response('B', available=['2024-01-15T12:00:00+09:00'], status=AttendanceStatus.NOT_ATTENDING),
            make_response('C', available=['2024-01-16T19:00:00+09:00']),
        ]

        assert count_available_on(responses, '2024-01-15T00:00:00+09:00') == 2

    def test_count_maybe(self):
        responses = [
            make_response('A', maybe=['2024-01-15T19:00:00+09:00']),
            make_response('B', available=['2024-01-15T19:00:00+09:00']),
        ]

        assert count_maybe_on(responses, date(2024, 1, 15)) == 1


class TestOptimalDate:

    def test_no_candidates(self):
        assert optimal_date([], [make_response()]) is None

    def test_most_available_wins(self):
        candidates = ['2024-01-15T19:00:00+09:00', '2024-01-16T19:00:00+09:00']
        responses = [
            make_response('A', available=[candidates[1]]),
            make_response('B', available=[candidates[0], candidates[1]]),
        ]

        assert optimal_date(candidates, responses) == candidates[1]

    def test_tie_goes_to_earliest_candidate(self):
        later = '2024-01-20T19:00:00+09:00'
        earlier = '2024-01-10T19:00:00+09:00'
        responses = [
            make_response('A', available=[later]),
            make_response('B', available=[earlier]),
        ]

        assert optimal_date([later, earlier], responses) == earlier

    def test_no_responses_returns_first_candidate(self):
        candidates = ['2024-02-01T19:00:00+09:00', '2024-01-01T19:00:00+09:00']

        assert optimal_date(candidates, []) == candidates[1]


class TestStatistics:

    def test_event_statistics(self):
        responses = [
            make_response('A', status=AttendanceStatus.ATTENDING),
            make_response('B', status=AttendanceStatus.ATTENDING),
            make_response('C', status=AttendanceStatus.MAYBE),
            make_response('D', status=AttendanceStatus.UNDECIDED),
        ]

        stats = event_statistics(responses)

        assert stats['total_responses'] == 4
        assert stats['attending_count'] == 2
        assert stats['maybe_count'] == 1
        assert stats['not_attending_count'] == 0
        assert stats['undecided_count'] == 1

    def test_date_statistics_sorted_by_available(self):
        first = '2024-01-15T19:00:00+09:00'
        second = '2024-01-16T19:00:00+09:00'
        third = '2024-01-17T19:00:00+09:00'
        responses = [
            make_response('A', available=[second], maybe=[first]),
            make_response('B', available=[second]),
        ]

        rows = date_statistics([first, second, third], responses)

        assert [row['date'] for row in rows] == [second, first, third]
        assert rows[0]['available_count'] == 2
        assert rows[1]['maybe_count'] == 1
