import logging
import sys

import arrow

from stempel import config, report, stats, storage, utils
from stempel.canonical import canonicalize
from stempel.errors import DataError, UsageError
from stempel.ledger import Config
from stempel.migrate import migrate
from stempel.ranges import local

log = logging.getLogger(__name__)


def add_timing(parser: utils.ArgumentParser, owner: utils.ArgumentParser):
    timing = parser.add_mutually_exclusive_group()
    timing.add_argument('-t', '--time', type=owner._parse_date, default=None,
                        help='Point in time like "11:40" or "2 hours ago" (default now)')
    timing.add_argument('-o', '--offset', type=owner._parse_offset, default=None,
                        help='Offset to the current time in format XX[h|m|s][+-]')


class ArgumentParser(utils.ArgumentParser):
    def __init__(self):
        super().__init__(prog='stempel', description='Track the time you spent working')
        self.add_argument('-s', '--storage', type=str, default=None, help='Path to the ledger file')
        self.add_argument('-c', '--config', type=str, default=config.DEFAULT_CONFIG_FILE)
        self.add_argument('-v', '--verbose', action='count', default=0)

        commands = self.add_subparsers(dest='command', metavar='command',
                                       parser_class=utils.ArgumentParser)
        commands.required = True

        add_timing(commands.add_parser('start', help='Start a working period'), self)
        add_timing(commands.add_parser('stop', help='Stop a working period'), self)

        pause_parser = commands.add_parser('break', help='Start or stop a break')
        pause_commands = pause_parser.add_subparsers(dest='break_command', metavar='action',
                                                    parser_class=utils.ArgumentParser)
        pause_commands.required = True
        add_timing(pause_commands.add_parser('start', help='Start a break'), self)
        add_timing(pause_commands.add_parser('stop', help='Stop a break'), self)
        duration_parser = pause_commands.add_parser('duration', aliases=['dur'],
                                                   help='Add a finished break of length HH:MM')
        duration_parser.add_argument('duration', type=self._parse_duration)

        commands.add_parser('cancel', help="Cancel the last action (a stop can't be undone)")

        stats_parser = commands.add_parser('stats', help='Print statistics about tracked time')
        stats_parser.add_argument('month', type=self._parse_month, nargs='?', default=None,
                                  help='Month name or number, "current" or "now"')
        stats_parser.add_argument('-e', '--entries', default=False, action='store_true',
                                  help='List the individual history entries')

        configure_parser = commands.add_parser('configure',
                                               help='Configure how stempel displays things')
        configure_parser.add_argument('--months', type=int, default=None,
                                      help='Number of past months shown by stats')
        configure_parser.add_argument('--daily-hours', type=int, default=None,
                                      help='Hours to work per day')
        weekly = configure_parser.add_mutually_exclusive_group()
        weekly.add_argument('--weekly', dest='weekly', action='store_true', default=None,
                            help='Show the total of the current week')
        weekly.add_argument('--no-weekly', dest='weekly', action='store_false', default=None)

        commands.add_parser('migrate', help='Migrate the ledger from the old record format, '
                                            'keeping a *.bak copy of the original')


def point_in_time(args):
    if args.time is not None:
        return args.time
    if args.offset is not None:
        return args.offset
    return arrow.utcnow()


def ask_keep_date(start, stop):
    print('You started on {} but stop on {}. Use {} as the stop date? [y/n]'.format(
        local(start).format('YYYY-MM-DD'), local(stop).format('YYYY-MM-DD'),
        local(stop).format('YYYY-MM-DD')))
    while True:
        try:
            answer = input()
        except EOFError:
            log.warning('No answer, keeping the stop date as given')
            return True
        try:
            return utils.parse_yes_no(answer)
        except ValueError as e:
            print(e, file=sys.stderr)


def start(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name, create=True)
    time = point_in_time(args)
    ledger.start(time)
    storage.save(file_name, ledger)
    print("You started at {}, let's go!".format(report.fmt_clock(time)))
    return 0


def stop(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name)
    net = ledger.stop(point_in_time(args), keep_date=ask_keep_date)
    canonicalize(ledger)
    storage.save(file_name, ledger)
    print('You worked {} today. Enjoy your evening \U0001F389'.format(report.fmt_duration(net)))
    return 0


def pause(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name)
    if args.break_command == 'start':
        worked = ledger.start_break(point_in_time(args))
        print('Started a break after {} of work.'.format(report.fmt_duration(worked)))
    elif args.break_command == 'stop':
        duration = ledger.finish_break(point_in_time(args))
        print('You had a break for {}. Way to go!'.format(report.fmt_duration(duration)))
    else:
        ledger.add_break(args.duration, arrow.utcnow())
        print('Added a break of {}.'.format(report.fmt_duration(args.duration)))
    storage.save(file_name, ledger)
    return 0


def cancel(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name)
    ledger.cancel()
    storage.save(file_name, ledger)
    print('Canceled last action.')
    return 0


def show_stats(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name)
    now = arrow.utcnow()
    settings = ledger.settings

    if args.entries:
        entries = ledger.month_range(*args.month) if args.month else list(ledger.history.items())
        print(report.history_table(entries, cfg['display']['style']))
        return 0

    if args.month is not None:
        months = [stats.MonthStats(*args.month, stats.monthly_stats(ledger, *args.month))]
        if not months[0].weeks:
            print('You did not work in {}/{}!'.format(args.month[1], args.month[0]), file=sys.stderr)
    else:
        local_now = local(now)
        months = stats.stats_over_history(ledger, local_now.year, local_now.month,
                                          settings.month_stats)

    for month in months:
        for line in report.month_lines(month):
            print(line)

    if settings.weekly_stats:
        week = stats.weekly_total(ledger, local(now).date())
        print('This week: {}'.format(report.fmt_duration(week)))

    for line in report.state_lines(stats.current_state_summary(ledger, now)):
        print(line)

    over = stats.overhours(ledger)
    if over is not None:
        print(report.overhours_line(over))

    average = stats.average_start_time(ledger)
    if average is not None:
        print('On average you start at {}.'.format(average.strftime('%H:%M')))
    return 0


def prompt_int(question: str, current: int or None):
    answer = input('    {} ({}): '.format(question, current if current is not None else '-'))
    try:
        return int(answer.strip())
    except ValueError:
        return current


def configure(args, file_name: str, cfg: dict):
    ledger = storage.load(file_name, create=True)
    current = ledger.settings
    if ledger.config is None:
        print('Nothing configured yet.')

    if args.months is None and args.daily_hours is None and args.weekly is None:
        print('Enter your desired value, leave blank for keeping the current value.')
        months = prompt_int('Number of months to display', current.month_stats)
        daily_hours = prompt_int('Daily working hours', current.daily_hours)
        weekly = input('    Show weekly stats (y/n): ')
        try:
            weekly_stats = utils.parse_yes_no(weekly)
        except ValueError:
            weekly_stats = current.weekly_stats
    else:
        months = args.months if args.months is not None else current.month_stats
        daily_hours = args.daily_hours if args.daily_hours is not None else current.daily_hours
        weekly_stats = args.weekly if args.weekly is not None else current.weekly_stats

    ledger.config = Config(months, daily_hours, weekly_stats)
    canonicalize(ledger)
    storage.save(file_name, ledger)

    print('Number of months in stats: {}'.format(ledger.config.month_stats))
    if ledger.config.daily_hours is not None:
        print('Daily working hours: {}'.format(ledger.config.daily_hours))
    if ledger.config.weekly_stats is not None:
        print('Weekly stats: {}'.format('yes' if ledger.config.weekly_stats else 'no'))
    return 0


def run_migration(args, file_name: str, cfg: dict):
    ledger, backup = migrate(file_name)
    print('Migrated {} entries, the old file is kept at {}'.format(len(ledger.history), backup))
    return 0


COMMANDS = {
    'start': start,
    'stop': stop,
    'break': pause,
    'cancel': cancel,
    'stats': show_stats,
    'configure': configure,
    'migrate': run_migration,
}


def describe(error: Exception):
    messages = []
    while error is not None:
        messages.append(str(error))
        error = error.__cause__
    return ': '.join(m for m in messages if m)


def main(argv=None):
    args = ArgumentParser().parse_args(argv)
    logging.basicConfig(level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
                        format='%(levelname)s: %(name)s: %(message)s')

    cfg = config.load(args.config)
    file_name = config.storage_file(cfg, args.storage)

    try:
        return COMMANDS[args.command](args, file_name, cfg)
    except UsageError as e:
        print(e, file=sys.stderr)
        return 1
    except DataError as e:
        print('Error: {}'.format(describe(e)), file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
