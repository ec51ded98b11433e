"""
Bounded forward search over NFL weeks.

Sleeper's "current week" is only a hint: individual leagues can run ahead of
or behind it, and ESPN's week numbering can disagree with the calendar. Both
the league scanner and the schedule resolver try the hinted week and then a
fixed number of following weeks, stopping at the first acceptable result.
"""

from typing import Awaitable, Callable, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")


def candidate_weeks(start_week: int, attempts: int) -> Iterator[int]:
    """Yield start_week, start_week + 1, ... for at most `attempts` weeks"""
    for offset in range(max(attempts, 0)):
        yield start_week + offset


async def first_matching_week(
    start_week: int,
    attempts: int,
    fetch: Callable[[int], Awaitable[T]],
    accept: Callable[[T], bool],
) -> Tuple[Optional[int], Optional[T]]:
    """
    Fetch each candidate week in order and return (week, result) for the
    first result `accept` approves, or (None, None) when none qualifies.
    """
    for week in candidate_weeks(start_week, attempts):
        result = await fetch(week)
        if accept(result):
            return week, result
    return None, None
