import json
import sys
from datetime import date, timedelta

import humanize
from arghandler import ArgumentHandler, subcmd
from colored import fg, attr

import mailboard.analytics
import mailboard.guesstimate
import mailboard.lister
import mailboard.networks
import mailboard.stats
import mailboard.tracer
from mailboard.cache import LogCache, get_transactions
from mailboard.config import load_config, setup_logging


class Context(object):
    def __init__(self, config, cache=None):
        self.config = config
        self.cache = cache or LogCache()

    def transactions(self):
        return get_transactions(self.config, self.cache)


def _add_date_range(parser):
    parser.add_argument('--start', help='Only from this day on (yyyy-mm-dd)')
    parser.add_argument('--end', help='Only up to and including this day (yyyy-mm-dd)')


def _in_range(context, args):
    transactions = context.transactions()
    return mailboard.lister.filter_by_date(transactions, args.start, args.end)


def _print_json(data):
    print(json.dumps(data, indent=2, default=str))


@subcmd('trace', help='Show everything logged for one queue id')
def trace(parser, context, args):
    parser.add_argument('mail_id')
    args = parser.parse_args(args)
    mailboard.tracer.trace(context.transactions(), args.mail_id)


@subcmd('list', help='List mail transactions, newest first')
def list_messages(parser, context, args):
    parser.add_argument('--from', help='From address (regex)')
    parser.add_argument('--to', help='To address (regex)')
    parser.add_argument('--status', help='Only this status (sent, bounced, deferred, ...)')
    parser.add_argument('--page', type=int, help='Page number, counted from 1')
    parser.add_argument('--limit', type=int, help='Messages per page')
    parser.add_argument('--json', help='Output as json', action='store_true', dest='as_json')
    _add_date_range(parser)

    today = date.today().__format__('%Y-%m-%d')
    yesterday = (date.today() - timedelta(1)).__format__('%Y-%m-%d')

    dategroup = parser.add_mutually_exclusive_group()
    dategroup.add_argument('--today', help='Show only from today', dest='day', action='store_const', const=today)
    dategroup.add_argument('--yesterday', help='Show only from yesterday', dest='day', action='store_const',
                           const=yesterday)
    dategroup.add_argument('--day', help='Filter to specific day (yyyy-mm-dd)', dest='day')

    args = parser.parse_args(args)

    mailboard.lister.list_traffic(context.transactions(), send_to=args.to, send_from=getattr(args, 'from'),
                                  day=args.day, start_date=args.start, end_date=args.end, status=args.status,
                                  page=args.page, limit=args.limit, as_json=args.as_json)


@subcmd('stats', help='Message counts per status')
def show_stats(parser, context, args):
    _add_date_range(parser)
    args = parser.parse_args(args)

    result = mailboard.stats.compute_stats(_in_range(context, args))
    print("Total:      {}".format(humanize.intcomma(result['total'])))
    for status in mailboard.stats.COMMON_STATUSES:
        print("{:<11} {}".format(mailboard.lister.colorize_status(status) + ':', humanize.intcomma(result[status])))
    others = {k: v for k, v in result['statuses'].items() if k not in mailboard.stats.COMMON_STATUSES}
    for status in sorted(others):
        print("{:<11} {}".format(status + ':', humanize.intcomma(others[status])))


@subcmd('volume', help='Daily sent/bounced/deferred volume')
def volume(parser, context, args):
    _add_date_range(parser)
    args = parser.parse_args(args)

    for day in mailboard.stats.volume_trends(_in_range(context, args)):
        print('{date}  {sent:>6} sent  {bounced:>6} bounced  {deferred:>6} deferred'.format(**day))


@subcmd('activity', help='Notable events in the last 24 hours')
def activity(parser, context, args):
    args = parser.parse_args(args)

    for event in mailboard.stats.recent_activity(context.transactions()):
        color = 'red' if event['type'] == 'security' else 'blue'
        print('{} {}[{}]{} {}'.format(humanize.naturaltime(event['timestamp']), fg(color), event['type'], attr(0),
                                      event['description']))


def _print_address_table(result, rate_name):
    print('--[ {} addresses ]--'.format(result['total']))
    for row in result['data']:
        print('{:<40} {:>6} messages  {:>5}%  {}'.format(row['email'], row['totalMessages'], row[rate_name],
                                                       ', '.join(row['relayIPs'])))


@subcmd('senders', help='Most active sender addresses')
def senders(parser, context, args):
    _add_date_range(parser)
    parser.add_argument('--limit', type=int, default=50)
    parser.add_argument('--json', help='Output as json', action='store_true', dest='as_json')
    args = parser.parse_args(args)

    result = mailboard.analytics.top_senders(_in_range(context, args), limit=args.limit)
    if args.as_json:
        _print_json(result)
    else:
        _print_address_table(result, 'successRate')


@subcmd('recipients', help='Most active recipient addresses')
def recipients(parser, context, args):
    _add_date_range(parser)
    parser.add_argument('--limit', type=int, default=50)
    parser.add_argument('--json', help='Output as json', action='store_true', dest='as_json')
    args = parser.parse_args(args)

    result = mailboard.analytics.top_recipients(_in_range(context, args), limit=args.limit)
    if args.as_json:
        _print_json(result)
    else:
        _print_address_table(result, 'deliveryRate')


@subcmd('ips', help='Clients that connected to postfix')
def ips(parser, context, args):
    _add_date_range(parser)
    parser.add_argument('--limit', type=int, default=50)
    parser.add_argument('--json', help='Output as json', action='store_true', dest='as_json')
    args = parser.parse_args(args)

    result = mailboard.analytics.connected_ips(_in_range(context, args), limit=args.limit)
    if args.as_json:
        _print_json(result)
        return

    print('--[ {} client addresses ]--'.format(result['total']))
    for row in result['data']:
        print('{:<39} {:>6} connections {:>6} messages  {}'.format(row['ip'], row['connections'],
                                                                  row['totalMessages'], ', '.join(row['hostnames'])))


@subcmd('summary', help='Unique senders, recipients and clients')
def summary(parser, context, args):
    _add_date_range(parser)
    args = parser.parse_args(args)

    _print_json(mailboard.analytics.summary(_in_range(context, args), start_date=args.start, end_date=args.end))


@subcmd('networks', help='Show or change mynetworks in the postfix config')
def show_networks(parser, context, args):
    parser.add_argument('--set', nargs='+', dest='networks', help='Replace mynetworks with these networks')
    args = parser.parse_args(args)

    config_path = mailboard.guesstimate.find_postfix_config(context.config.config_path)
    if args.networks:
        result = mailboard.networks.update_networks(config_path, args.networks)
        print(fg('green') + 'Networks updated, reload postfix to apply.' + attr(0))
    else:
        result = mailboard.networks.read_networks(config_path)
    for network in result:
        print(network)


@subcmd('guesses', help='Show which files would be read')
def guesses(parser, context, args):
    parser.parse_args(args)
    print("--[ Mail log files ]--")
    try:
        for log in mailboard.guesstimate.find_mail_log(context.config.log_path):
            print(log)
    except OSError as e:
        print(fg('red') + 'Cannot list mail logs: {}'.format(e) + attr(0))
    print("--[ Postfix config ]--")
    print(mailboard.guesstimate.find_postfix_config(context.config.config_path))


def main(argv=None):
    config = load_config()

    handler = ArgumentHandler(description='Postfix mail log dashboard')
    handler.add_argument('--log-path', help='Main postfix log file (default {})'.format(config.log_path))
    handler.add_argument('--config-path', help='Postfix main.cf (default {})'.format(config.config_path))
    handler.add_argument('--debug', help='Verbose logging', action='store_true')

    def make_context(args):
        if args.log_path:
            config.log_path = args.log_path
        if args.config_path:
            config.config_path = args.config_path
        if args.debug:
            config.log_level = 'debug'
        setup_logging(config.log_level)
        return Context(config)

    try:
        handler.run(argv, context_fxn=make_context)
    except (mailboard.networks.NetworkConfigError, ValueError) as e:
        print(fg('red') + str(e) + attr(0), file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
