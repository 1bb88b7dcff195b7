"""Human readable rendering of ledger contents and statistics."""
import calendar

from tabulate import tabulate

from stempel.duration import Duration
from stempel.ledger import State
from stempel.ranges import local
from stempel.stats import MonthStats, StateSummary


def fmt_duration(duration: Duration):
    h, m = duration.hours_minutes()
    return '{}{}:{:02d}h'.format('-' if duration.is_negative() else '', h, m)


def fmt_clock(time):
    return local(time).format('HH:mm')


def month_lines(stats: MonthStats):
    if not stats.weeks:
        return []
    lines = ['{} {}:'.format(calendar.month_name[stats.month], stats.year)]
    for week in stats.weeks:
        h, m = week.duration.hours_minutes()
        lines.append(' Week {:>2}: {:>4}:{:02d}h'.format(week.week, h, m))
    return lines


def state_lines(summary: StateSummary):
    if summary.state == State.IDLE:
        return []

    lines = ['You started at {}, that was {} ago.'.format(
        fmt_clock(summary.start), fmt_duration(summary.elapsed))]
    for begin, duration in summary.breaks:
        lines.append(' Break at {} for {}'.format(fmt_clock(begin), fmt_duration(duration)))
    if summary.state == State.ON_BREAK:
        lines.append(" You're on a break since {}.".format(fmt_clock(summary.break_start)))
    if summary.break_sum:
        lines.append('Your breaks add up to {}.'.format(fmt_duration(summary.break_sum)))

    if summary.remaining is not None:
        if summary.remaining.is_negative():
            lines.append("You're done, {} overhours.".format(fmt_duration(-summary.remaining)))
        else:
            lines.append('You still need to work {}.'.format(fmt_duration(summary.remaining)))
    return lines


def overhours_line(overhours: Duration):
    return 'Overhours: {}'.format(fmt_duration(overhours))


def history_table(entries, style: str = 'simple'):
    rows = []
    for stop, duration in entries:
        when = local(stop)
        rows.append([when.format('ddd MMM DD YYYY'), when.format('HH:mm'), fmt_duration(duration)])
    return tabulate(rows, headers=['date', 'stop', 'worked'], tablefmt=style)
