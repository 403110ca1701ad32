import textwrap

import humanize
from colored import fg, attr

from mailboard.analytics import extract_client_ip, extract_client_hostname
from mailboard.lister import colorize_status


def find_transaction(transactions, queue_id):
    queue_id = queue_id.upper()
    for message in transactions:
        if message.id == queue_id:
            return message
    return None


def trace(transactions, queue_id):
    message = find_transaction(transactions, queue_id)
    if message is None:
        print(fg('red') + 'No transaction found for queue id {}'.format(queue_id) + attr(0))
        return None

    client = None
    for line in message.lines:
        ip = extract_client_ip(line)
        if ip:
            client = '{} ({})'.format(extract_client_hostname(line) or 'unknown', ip)
            break

    print("Queue-id:   {}".format(fg('blue') + message.id + attr(0)))
    print("From:       {}".format(fg('blue') + message.message_from + attr(0)))
    print("To:         {}".format(fg('blue') + message.message_to + attr(0)))
    if client:
        print("Client:     {}".format(client))
    print("Last event: {:%Y-%m-%d %H:%M:%S} ({})".format(message.timestamp, humanize.naturaltime(message.timestamp)))
    print("Status:     {}".format(colorize_status(message.status)))
    print(textwrap.indent(textwrap.fill(message.detail), '\t'))
    print()
    print("--[ Log lines ]--")
    for line in message.lines:
        print(line)
    return message
