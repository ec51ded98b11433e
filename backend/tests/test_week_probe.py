"""
Tests for the bounded week search
"""
import asyncio
from unittest.mock import AsyncMock

from gamewatch.services.week_probe import candidate_weeks, first_matching_week


class TestCandidateWeeks:
    def test_yields_bounded_sequence(self):
        assert list(candidate_weeks(7, 5)) == [7, 8, 9, 10, 11]

    def test_zero_attempts(self):
        assert list(candidate_weeks(7, 0)) == []


class TestFirstMatchingWeek:
    def test_returns_first_accepted_week(self):
        fetch = AsyncMock(side_effect=lambda week: [] if week < 9 else [week])

        week, result = asyncio.run(first_matching_week(7, 5, fetch, bool))

        assert week == 9
        assert result == [9]
        assert fetch.await_count == 3

    def test_gives_up_after_attempts(self):
        fetch = AsyncMock(return_value=[])

        week, result = asyncio.run(first_matching_week(3, 4, fetch, bool))

        assert week is None
        assert result is None
        assert [c.args[0] for c in fetch.await_args_list] == [3, 4, 5, 6]
