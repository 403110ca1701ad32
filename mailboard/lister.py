import datetime
import json
import re

import humanize
from colored import fg, attr

STATUS_COLORS = {
    'sent': 'green',
    'deferred': 'yellow',
    'bounced': 'red',
    'rejected': 'red',
}


def colorize_status(status):
    color = STATUS_COLORS.get(status)
    if color is None:
        return status
    return fg(color) + status + attr(0)


def _as_date(value):
    if value is None or isinstance(value, datetime.date):
        return value
    return datetime.datetime.strptime(value, '%Y-%m-%d').date()


def filter_by_date(transactions, start_date=None, end_date=None):
    start_date = _as_date(start_date)
    end_date = _as_date(end_date)
    result = transactions
    if start_date:
        start = datetime.datetime.combine(start_date, datetime.time.min)
        result = [t for t in result if t.timestamp >= start]
    if end_date:
        end = datetime.datetime.combine(end_date, datetime.time.max)
        result = [t for t in result if t.timestamp <= end]
    return list(result)


def filter_by_status(transactions, status=None):
    if not status or status == 'all':
        return list(transactions)
    return [t for t in transactions if t.status == status]


def filter_by_address(transactions, send_from=None, send_to=None):
    result = transactions
    if send_from:
        regex = re.compile(send_from)
        result = [t for t in result if regex.search(t.message_from)]
    if send_to:
        regex = re.compile(send_to)
        result = [t for t in result if regex.search(t.message_to)]
    return list(result)


def _positive_int(value):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return None
    if value <= 0:
        return None
    return value


def paginate(transactions, page=None, limit=None):
    page = _positive_int(page)
    limit = _positive_int(limit)
    if page and limit:
        start = (page - 1) * limit
        return transactions[start:start + limit]
    if limit:
        return transactions[:limit]
    return transactions[:]


def list_traffic(transactions, send_to=None, send_from=None, day=None, start_date=None, end_date=None, status=None,
                 page=None, limit=None, as_json=False):
    if day:
        start_date = end_date = day

    if not as_json and (send_to or send_from or start_date or end_date or status):
        print('--[ Filters ]--')
        if send_to:
            print('To: {}'.format(send_to))
        if send_from:
            print('From: {}'.format(send_from))
        if start_date == end_date and start_date:
            print('Day: {}'.format(start_date))
        else:
            if start_date:
                print('Since: {}'.format(start_date))
            if end_date:
                print('Until: {}'.format(end_date))
        if status:
            print('Status: {}'.format(colorize_status(status)))
        print()

    result = filter_by_date(transactions, start_date, end_date)
    result = filter_by_status(result, status)
    result = filter_by_address(result, send_from=send_from, send_to=send_to)
    total = len(result)
    result = paginate(result, page=page, limit=limit)

    if as_json:
        print(json.dumps([t.to_dict() for t in result], indent=2))
        return result

    for message in result:
        print('{:%Y-%m-%d %H:%M:%S} ({}) {} {} -> {} [{}]'.format(message.timestamp,
                                                                   humanize.naturaltime(message.timestamp),
                                                                   message.id, message.message_from,
                                                                   message.message_to,
                                                                   colorize_status(message.status)))
    print()
    print('Showing {} of {} messages'.format(humanize.intcomma(len(result)), humanize.intcomma(total)))
    return result
