"""
Sender, recipient and client address statistics. These re-scan the raw lines of each
transaction to find the client that handed the message to postfix.
"""
import re
from collections import Counter

from mailboard.datastructure import UNKNOWN

REGEX_CONNECT_IPV4 = re.compile(r'connect from [^\[]*\[(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})\]')
REGEX_CLIENT_IPV4 = re.compile(r'client=[^\[]*\[(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})\]')
REGEX_CONNECT_IPV6 = re.compile(r'connect from [^\[]*\[([0-9a-fA-F:]+)\]')
REGEX_CLIENT_IPV6 = re.compile(r'client=[^\[]*\[([0-9a-fA-F:]+)\]')
REGEX_CLIENT_HOSTNAME = re.compile(r'(?:connect from|client=)\s*([^\[]+)\[')

CLIENT_IP_REGEXES = [REGEX_CONNECT_IPV4, REGEX_CLIENT_IPV4, REGEX_CONNECT_IPV6, REGEX_CLIENT_IPV6]


def extract_client_ip(line):
    # relay= addresses are the destination, never the client
    for regex in CLIENT_IP_REGEXES:
        part = regex.search(line)
        if part:
            return part.group(1)
    return None


def extract_client_hostname(line):
    part = REGEX_CLIENT_HOSTNAME.search(line)
    if not part:
        return None
    hostname = part.group(1).strip()
    if not hostname or hostname == 'unknown':
        return None
    return hostname


def _rate(part, total):
    if total <= 0:
        return '0.0'
    return '{:.1f}'.format(part / total * 100)


def _client_ips(message):
    result = []
    for line in message.lines:
        ip = extract_client_ip(line)
        if ip and ip not in result:
            result.append(ip)
    return result


class _AddressTally:
    def __init__(self, address, timestamp):
        self.address = address
        self.statuses = Counter()
        self.total = 0
        self.first_seen = timestamp
        self.last_seen = timestamp
        self.client_ips = []

    def add(self, message):
        self.total += 1
        self.statuses[message.status] += 1
        for ip in _client_ips(message):
            if ip not in self.client_ips:
                self.client_ips.append(ip)
        self.first_seen = min(self.first_seen, message.timestamp)
        self.last_seen = max(self.last_seen, message.timestamp)

    def to_dict(self, rate_name):
        return {
            'email': self.address,
            'totalMessages': self.total,
            'sent': self.statuses['sent'],
            'bounced': self.statuses['bounced'],
            'deferred': self.statuses['deferred'],
            'rejected': self.statuses['rejected'],
            'statuses': dict(self.statuses),
            rate_name: _rate(self.statuses['sent'], self.total),
            'firstSeen': self.first_seen,
            'lastSeen': self.last_seen,
            'relayIPs': self.client_ips[:],
        }


def _top_addresses(transactions, attribute, rate_name, limit):
    tallies = {}
    for message in transactions:
        address = getattr(message, attribute)
        if not address or address == UNKNOWN:
            continue
        key = address.lower()
        if key not in tallies:
            tallies[key] = _AddressTally(address, message.timestamp)
        tallies[key].add(message)

    data = sorted((t.to_dict(rate_name) for t in tallies.values()), key=lambda d: d['totalMessages'], reverse=True)
    return {'total': len(tallies), 'data': data[:limit]}


def top_senders(transactions, limit=50):
    return _top_addresses(transactions, 'message_from', 'successRate', limit)


def top_recipients(transactions, limit=50):
    return _top_addresses(transactions, 'message_to', 'deliveryRate', limit)


def connected_ips(transactions, limit=50):
    counts = {}
    details = {}
    for message in transactions:
        for line in message.lines:
            ip = extract_client_ip(line)
            if not ip:
                continue
            if ip not in counts:
                counts[ip] = {'connections': 0, 'messages': 0, 'statuses': Counter()}
                details[ip] = {'firstSeen': message.timestamp, 'lastSeen': message.timestamp, 'hostnames': []}
            counts[ip]['connections'] += 1
            hostname = extract_client_hostname(line)
            if hostname and hostname not in details[ip]['hostnames']:
                details[ip]['hostnames'].append(hostname)

        # The message belongs to the client of its first line
        first_ip = extract_client_ip(message.lines[0]) if message.lines else None
        if first_ip and first_ip in counts:
            counts[first_ip]['messages'] += 1
            counts[first_ip]['statuses'][message.status] += 1
            details[first_ip]['firstSeen'] = min(details[first_ip]['firstSeen'], message.timestamp)
            details[first_ip]['lastSeen'] = max(details[first_ip]['lastSeen'], message.timestamp)

    data = []
    for ip, count in counts.items():
        statuses = count['statuses']
        data.append({
            'ip': ip,
            'connections': count['connections'],
            'totalMessages': count['messages'],
            'sent': statuses['sent'],
            'bounced': statuses['bounced'],
            'deferred': statuses['deferred'],
            'rejected': statuses['rejected'],
            'statuses': dict(statuses),
            'successRate': _rate(statuses['sent'], count['messages']),
            'hostnames': details[ip]['hostnames'],
            'firstSeen': details[ip]['firstSeen'],
            'lastSeen': details[ip]['lastSeen'],
        })
    data.sort(key=lambda d: d['connections'], reverse=True)
    return {'total': len(counts), 'data': data[:limit]}


def _domain(address):
    if '@' not in address:
        return None
    return address.split('@', 1)[1].lower() or None


def summary(transactions, start_date=None, end_date=None):
    senders = set()
    recipients = set()
    ips = set()
    sender_domains = set()
    recipient_domains = set()

    for message in transactions:
        if message.message_from and message.message_from != UNKNOWN:
            senders.add(message.message_from.lower())
            domain = _domain(message.message_from)
            if domain:
                sender_domains.add(domain)
        if message.message_to and message.message_to != UNKNOWN:
            recipients.add(message.message_to.lower())
            domain = _domain(message.message_to)
            if domain:
                recipient_domains.add(domain)
        ips.update(_client_ips(message))

    return {
        'uniqueSenders': len(senders),
        'uniqueRecipients': len(recipients),
        'uniqueIPs': len(ips),
        'senderDomains': len(sender_domains),
        'recipientDomains': len(recipient_domains),
        'totalMessages': len(transactions),
        'dateRange': {
            'start': str(start_date) if start_date else 'all',
            'end': str(end_date) if end_date else 'all',
        },
    }
