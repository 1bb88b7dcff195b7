import argparse
import calendar
import re

import arrow
from arrow import Arrow

from stempel.duration import Duration

OFFSET_RE = re.compile(r'^\s*(\d+)([hms])([+-])\s*$')
DURATION_RE = re.compile(r'^\s*(\d+):(\d{1,2})\s*$')

MONTHS = {name.lower(): number for number, name in enumerate(calendar.month_name) if name}


def parse_offset(offset: str, now: Arrow):
    """Turn `XX[h|m|s][+-]`, e.g. `10m-`, into a point in time relative to `now`."""
    match = OFFSET_RE.match(offset)
    if not match:
        raise ValueError('Failed to parse "{}" into an offset'.format(offset))
    number, unit, sign = match.groups()
    seconds = int(number) * {'h': 3600, 'm': 60, 's': 1}[unit]
    return now.shift(seconds=seconds if sign == '+' else -seconds)


def parse_duration(duration: str):
    match = DURATION_RE.match(duration)
    if not match:
        raise ValueError('Failed to parse "{}" into a duration, expected HH:MM'.format(duration))
    hours, minutes = (int(g) for g in match.groups())
    if minutes >= 60:
        raise ValueError('Minutes must be below 60 in "{}"'.format(duration))
    return Duration.hours(hours) + Duration.minutes(minutes)


def parse_month(month: str, now: Arrow):
    """Month name, number or `current`/`now`, resolved to (year, month).

    Months after the current one refer to the previous year.
    """
    key = month.strip().lower()
    if key in ('current', 'now'):
        return now.year, now.month
    if key.isdigit():
        number = int(key)
    elif key in MONTHS:
        number = MONTHS[key]
    else:
        raise ValueError('Failed to parse "{}" into a month'.format(month))
    if not 1 <= number <= 12:
        raise ValueError('There is no month {}'.format(number))
    year = now.year if number <= now.month else now.year - 1
    return year, number


def parse_yes_no(answer: str):
    answer = answer.strip().lower()
    if answer in ('y', 'yes'):
        return True
    if answer in ('n', 'no'):
        return False
    raise ValueError('Failed to parse "{}" into "yes" or "no"'.format(answer))


class ArgumentParser(argparse.ArgumentParser):
    def _parse_date(self, date: str):
        import dateparser
        dt = dateparser.parse(date, languages=['en'], settings={'RETURN_AS_TIMEZONE_AWARE': True})
        if dt is None:
            self.error('Invalid date format "{}". Try something like "11:40" or "2 hours ago"'
                       .format(date))
        return arrow.Arrow.fromdatetime(dt)

    def _parse_offset(self, offset: str):
        try:
            return parse_offset(offset, arrow.utcnow())
        except ValueError as e:
            self.error(str(e))

    def _parse_duration(self, duration: str):
        try:
            return parse_duration(duration)
        except ValueError as e:
            self.error(str(e))

    def _parse_month(self, month: str):
        try:
            return parse_month(month, arrow.now())
        except ValueError as e:
            self.error(str(e))
