"""Calendar arithmetic behind the range queries of the ledger.

All bounds are returned as UTC `Arrow` instants; lower bounds are
inclusive, upper bounds exclusive.
"""
import logging
from datetime import date, datetime

import arrow
from arrow import Arrow
from dateutil import tz as dateutil_tz

from stempel.errors import InvalidRange

log = logging.getLogger(__name__)


def next_month(year: int, month: int):
    if month == 12:
        return year + 1, 1
    return year, month + 1


def previous_month(year: int, month: int):
    if month == 1:
        return year - 1, 12
    return year, month - 1


def month_bounds(year: int, month: int):
    """First instant of the month and first instant of the following one."""
    try:
        lower = Arrow(year, month, 1, tzinfo='UTC')
        upper = Arrow(*next_month(year, month), 1, tzinfo='UTC')
    except (ValueError, OverflowError) as e:
        raise InvalidRange('Cannot build a range for month {}/{}'.format(month, year)) from e
    log.debug('Month %d/%d spans [%s, %s)', month, year, lower, upper)
    return lower, upper


def _local_midnight(day: date, tzinfo):
    naive = datetime(day.year, day.month, day.day)
    midnight = naive.replace(tzinfo=tzinfo)
    if not dateutil_tz.datetime_exists(midnight):
        raise InvalidRange('Midnight of {} does not exist in {}'.format(day.isoformat(), tzinfo))
    return arrow.get(midnight).to('UTC')


def day_bounds(day: date, tz='local'):
    """Local midnight of `day` and of the day after, converted to UTC."""
    if tz == 'local':
        tzinfo = dateutil_tz.tzlocal()
    elif isinstance(tz, str):
        tzinfo = dateutil_tz.gettz(tz)
    else:
        tzinfo = tz
    if tzinfo is None:
        raise InvalidRange('Unknown timezone {}'.format(tz))
    try:
        following = date.fromordinal(day.toordinal() + 1)
    except (ValueError, OverflowError) as e:
        raise InvalidRange('Cannot build a range for {}'.format(day)) from e
    lower = _local_midnight(day, tzinfo)
    upper = _local_midnight(following, tzinfo)
    log.debug('Day %s spans [%s, %s)', day, lower, upper)
    return lower, upper


def trailing_months(year: int, month: int, count: int):
    """The `count + 1` months ending with the given one, oldest first."""
    months = [(year, month)]
    for _ in range(count):
        months.append(previous_month(*months[-1]))
    return list(reversed(months))


def local(time: Arrow) -> Arrow:
    """Convert to the zone the system currently observes for that instant."""
    return time.to(dateutil_tz.tzlocal())


def iso_week(time: Arrow):
    return local(time).isocalendar()[1]
