"""Model of the time balance.

A `Ledger` holds the work period that is currently running, if any, the
breaks taken during it and the history of finished work periods. It
knows nothing about files; see `stempel.storage` for that.
"""
import logging
from bisect import bisect_left
from datetime import date
from enum import Enum, unique

import arrow
from arrow import Arrow

from stempel import ranges
from stempel.duration import Duration, ZERO
from stempel.errors import (AlreadyOnBreak, AlreadyStarted, NegativeDuration, NoActiveBreak,
                            NotStarted, NotWorking, NothingToCancel, OnBreakConflict)

log = logging.getLogger(__name__)


def utc(time):
    if not isinstance(time, Arrow):
        time = arrow.get(time)
    return time.to('UTC')


@unique
class State(Enum):
    IDLE = 0
    WORKING = 1
    ON_BREAK = 2

    def __str__(self):
        return self.name.lower().replace('_', ' ')


class Config:
    def __init__(self, month_stats: int = 2, daily_hours: int or None = None,
                 weekly_stats: bool or None = None):
        self.month_stats = month_stats
        self.daily_hours = daily_hours
        self.weekly_stats = weekly_stats

    @property
    def daily_quota(self):
        if self.daily_hours is None:
            return None
        return Duration.hours(self.daily_hours)

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return (self.month_stats, self.daily_hours, self.weekly_stats) == \
            (other.month_stats, other.daily_hours, other.weekly_stats)

    def __repr__(self):
        return 'Config({}, {}, {})'.format(self.month_stats, self.daily_hours, self.weekly_stats)


class Ledger:
    def __init__(self, open_start: Arrow = None, open_break: Arrow = None, pending_breaks=None,
                 config: Config = None, history: dict = None):
        self.open_start = utc(open_start) if open_start is not None else None
        self.open_break = utc(open_break) if open_break is not None else None
        self.pending_breaks = [(utc(t), d) for t, d in (pending_breaks or [])]
        self.config = config
        self.history = {}
        for time, duration in (history or {}).items():
            self.insert(time, duration)

    @property
    def state(self):
        if self.open_start is None:
            return State.IDLE
        if self.open_break is None:
            return State.WORKING
        return State.ON_BREAK

    @property
    def settings(self):
        """The configuration, or the defaults if nothing was configured yet."""
        return self.config if self.config is not None else Config()

    def insert(self, time: Arrow, duration: Duration):
        time = utc(time)
        in_order = not self.history or time >= next(reversed(self.history))
        self.history[time] = duration
        if not in_order:
            self.history = dict(sorted(self.history.items(), key=lambda e: e[0]))

    def accumulated_breaks(self):
        return sum((d for _, d in self.pending_breaks), ZERO)

    def reset(self):
        """Forget the running work period and its breaks."""
        self.open_start = None
        self.pending_breaks = []

    def start(self, time: Arrow):
        if self.open_start is not None:
            raise AlreadyStarted(self.open_start)
        self.open_start = utc(time)
        log.debug('Started work at %s', self.open_start)

    def stop(self, time: Arrow, keep_date=None):
        """Finish the running work period and record its net duration.

        If the stop falls on another local calendar day than the start,
        `keep_date(start, stop)` decides whether the stop is taken as is
        (True) or moved to the start's day at the same clock time (False).
        """
        if self.open_start is None:
            raise NotStarted()
        if self.open_break is not None:
            raise OnBreakConflict(self.open_break)

        time = utc(time)
        local_start = ranges.local(self.open_start)
        local_stop = ranges.local(time)
        if local_start.date() != local_stop.date() and keep_date is not None \
                and not keep_date(self.open_start, time):
            time = local_stop.replace(year=local_start.year, month=local_start.month,
                                      day=local_start.day).to('UTC')
            log.debug('Moved stop onto the start day: %s', time)

        worked = Duration.between(self.open_start, time)
        if worked.is_negative():
            raise NegativeDuration('Your stop at {} lies before your start'
                                   .format(ranges.local(time).format('YYYY-MM-DD HH:mm')))
        net = worked - self.accumulated_breaks()
        if net.is_negative():
            raise NegativeDuration()

        self.insert(time, net)
        self.reset()
        log.debug('Stopped work at %s after %r', time, net)
        return net

    def cancel(self):
        """Drop a running break, or the running work period if there is no break."""
        if self.open_break is not None:
            self.open_break = None
            log.debug('Cancelled break')
        elif self.open_start is not None:
            self.reset()
            log.debug('Cancelled work period')
        else:
            raise NothingToCancel()

    def start_break(self, time: Arrow):
        if self.open_start is None:
            raise NotWorking()
        if self.open_break is not None:
            raise AlreadyOnBreak(self.open_break)
        time = utc(time)
        self.open_break = time
        return Duration.between(self.open_start, time)

    def finish_break(self, time: Arrow):
        if self.open_start is None:
            raise NotWorking()
        if self.open_break is None:
            raise NoActiveBreak()
        time = utc(time)
        duration = Duration.between(self.open_break, time)
        if duration.is_negative():
            raise NegativeDuration('Your break would end before it started')
        self.pending_breaks.append((self.open_break, duration))
        self.open_break = None
        return duration

    def add_break(self, duration: Duration, time: Arrow):
        """Record a finished break of known length that ended at `time`."""
        if self.open_start is None:
            raise NotWorking()
        if self.open_break is not None:
            raise OnBreakConflict(self.open_break)
        if duration.is_negative():
            raise NegativeDuration('A break cannot have a negative length')
        begin = utc(time).shift(seconds=-duration.seconds)
        self.pending_breaks.append((begin, duration))
        return begin

    def range(self, lower: Arrow, upper: Arrow):
        """History entries with lower <= stop time < upper, oldest first."""
        keys = list(self.history)
        first = bisect_left(keys, utc(lower))
        last = bisect_left(keys, utc(upper))
        return [(k, self.history[k]) for k in keys[first:last]]

    def month_range(self, year: int, month: int):
        return self.range(*ranges.month_bounds(year, month))

    def daily_range(self, day: date, tz='local'):
        return self.range(*ranges.day_bounds(day, tz))

    def week_entries(self, day: date):
        # week numbers only, entries of the same week in other years match as well
        week = day.isocalendar()[1]
        return [(k, d) for k, d in self.history.items() if ranges.iso_week(k) == week]

    def __eq__(self, other):
        if not isinstance(other, Ledger):
            return NotImplemented
        return (self.open_start == other.open_start
                and self.open_break == other.open_break
                and self.pending_breaks == other.pending_breaks
                and self.config == other.config
                and list(self.history.items()) == list(other.history.items()))

    def __repr__(self):
        return 'Ledger({}, {}, {}, {}, {} entries)'.format(
            repr(self.open_start), repr(self.open_break), repr(self.pending_breaks),
            repr(self.config), len(self.history))
