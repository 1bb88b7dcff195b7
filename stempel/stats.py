"""Aggregations over the history of a ledger."""
import logging
from collections import namedtuple
from datetime import date, time
from itertools import groupby

from arrow import Arrow

from stempel import ranges
from stempel.duration import Duration, ZERO
from stempel.ledger import Ledger, State

log = logging.getLogger(__name__)

WeekTotal = namedtuple('WeekTotal', ['week', 'duration'])
MonthStats = namedtuple('MonthStats', ['year', 'month', 'weeks'])


def monthly_stats(ledger: Ledger, year: int, month: int):
    """Sum the month's entries per run of consecutive entries in the same ISO week."""
    entries = ledger.month_range(year, month)
    totals = []
    for week, group in groupby(entries, key=lambda e: ranges.iso_week(e[0])):
        totals.append(WeekTotal(week, sum((d for _, d in group), ZERO)))
    log.debug('Month %d/%d: %d entries in %d weeks', month, year, len(entries), len(totals))
    return totals


def stats_over_history(ledger: Ledger, year: int, month: int, count: int):
    return [MonthStats(y, m, monthly_stats(ledger, y, m))
            for y, m in ranges.trailing_months(year, month, count)]


def weekly_total(ledger: Ledger, day: date):
    return sum((d for _, d in ledger.week_entries(day)), ZERO)


def overhours(ledger: Ledger):
    """Surplus over the daily quota, charged once per history entry."""
    quota = ledger.settings.daily_quota
    if quota is None:
        return None
    return sum((d - quota for d in ledger.history.values()), ZERO)


class StateSummary:
    def __init__(self, state: State, start: Arrow or None = None, elapsed: Duration or None = None,
                 breaks=(), break_start: Arrow or None = None, break_sum: Duration = ZERO,
                 remaining: Duration or None = None):
        self.state = state
        self.start = start
        self.elapsed = elapsed
        self.breaks = list(breaks)
        self.break_start = break_start
        self.break_sum = break_sum
        self.remaining = remaining

    def __repr__(self):
        return 'StateSummary({}, {}, {}, {})'.format(self.state, repr(self.start),
                                                     repr(self.elapsed), repr(self.remaining))


def current_state_summary(ledger: Ledger, now: Arrow):
    state = ledger.state
    if state == State.IDLE:
        return StateSummary(state)

    elapsed = Duration.between(ledger.open_start, now)
    break_sum = ledger.accumulated_breaks()
    if ledger.open_break is not None:
        break_sum += Duration.between(ledger.open_break, now)

    remaining = None
    quota = ledger.settings.daily_quota
    if quota is not None:
        # breaks do not count as work, so they push the end of the day back
        remaining = quota - elapsed + break_sum

    return StateSummary(state, ledger.open_start, elapsed, ledger.pending_breaks,
                        ledger.open_break, break_sum, remaining)


def average_start_time(ledger: Ledger):
    """Mean local clock time at which the recorded work periods began.

    The begin of a period is its stop time minus its net duration, so
    breaks shift it slightly later than the actual start. After
    canonicalization a day is keyed by its first stop while carrying the
    whole day's duration, so a split day reports an earlier begin than
    either of its periods had.
    """
    if not ledger.history:
        return None
    seconds = []
    for stop, duration in ledger.history.items():
        begin = ranges.local(stop.shift(seconds=-duration.seconds))
        seconds.append(begin.hour * 3600 + begin.minute * 60 + begin.second)
    mean = sum(seconds) // len(seconds)
    return time(mean // 3600, (mean // 60) % 60, mean % 60)
