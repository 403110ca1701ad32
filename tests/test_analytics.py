import datetime

import pytest

from mailboard.analytics import (
    connected_ips,
    extract_client_hostname,
    extract_client_ip,
    summary,
    top_recipients,
    top_senders,
)
from mailboard.parser import parse_line
from mailboard.aggregator import aggregate


@pytest.fixture
def transactions(sample_log, now):
    return aggregate([parse_line(line, now=now) for line in sample_log if parse_line(line, now=now)])


def test_extract_client_ip_from_connect():
    assert extract_client_ip('postfix/smtpd[1]: connect from a.example.com[192.0.2.7]') == '192.0.2.7'


def test_extract_client_ip_from_client():
    assert extract_client_ip('ABCDEF0123: client=unknown[198.51.100.2]') == '198.51.100.2'


def test_extract_client_ip_ipv6():
    assert extract_client_ip('ABCDEF0123: client=v6.example.com[2001:db8::1]') == '2001:db8::1'


def test_relay_address_is_not_a_client():
    assert extract_client_ip('ABCDEF0123: to=<a@b.c>, relay=mx.b.c[203.0.113.9]:25, status=sent') is None


def test_extract_client_hostname():
    assert extract_client_hostname('connect from a.example.com[192.0.2.7]') == 'a.example.com'
    assert extract_client_hostname('ABCDEF0123: client=b.example.com[192.0.2.8]') == 'b.example.com'
    assert extract_client_hostname('ABCDEF0123: client=unknown[192.0.2.8]') is None
    assert extract_client_hostname('status=sent') is None


def test_top_senders(transactions):
    result = top_senders(transactions)
    assert result['total'] == 2
    alice = [row for row in result['data'] if row['email'] == 'alice@example.com'][0]
    assert alice['totalMessages'] == 1
    assert alice['sent'] == 1
    assert alice['successRate'] == '100.0'
    assert alice['relayIPs'] == ['10.0.0.5']


def test_top_senders_groups_case_insensitive():
    base = datetime.datetime(2024, 6, 1)
    lines = [
        parse_line('Jun 01 00:00:01 m postfix/qmgr[1]: AAAAAAAAAA: from=<Alice@Example.com>', now=base),
        parse_line('Jun 01 00:00:02 m postfix/smtp[1]: AAAAAAAAAA: to=<x@y.z>, status=sent', now=base),
        parse_line('Jun 01 00:00:03 m postfix/qmgr[1]: BBBBBBBBBB: from=<alice@example.com>', now=base),
        parse_line('Jun 01 00:00:04 m postfix/smtp[1]: BBBBBBBBBB: to=<x@y.z>, status=bounced', now=base),
    ]
    result = top_senders(aggregate(lines), limit=1)
    assert result['total'] == 1
    row = result['data'][0]
    assert row['totalMessages'] == 2
    assert row['successRate'] == '50.0'
    assert row['firstSeen'] == datetime.datetime(2024, 6, 1, 0, 0, 2)
    assert row['lastSeen'] == datetime.datetime(2024, 6, 1, 0, 0, 4)


def test_top_recipients(transactions):
    result = top_recipients(transactions)
    assert result['total'] == 2
    dave = [row for row in result['data'] if row['email'] == 'dave@example.net'][0]
    assert dave['deferred'] == 1
    assert dave['deliveryRate'] == '0.0'


def test_connected_ips(transactions):
    result = connected_ips(transactions)
    assert result['total'] == 2
    by_ip = {row['ip']: row for row in result['data']}
    assert by_ip['10.0.0.5']['totalMessages'] == 1
    assert by_ip['10.0.0.5']['sent'] == 1
    assert by_ip['10.0.0.5']['hostnames'] == ['client.example.com']
    assert by_ip['10.0.0.6']['deferred'] == 1
    assert by_ip['10.0.0.6']['hostnames'] == []
    assert by_ip['10.0.0.6']['successRate'] == '0.0'


def test_summary(transactions):
    result = summary(transactions, start_date='2024-06-01')
    assert result == {
        'uniqueSenders': 2,
        'uniqueRecipients': 2,
        'uniqueIPs': 2,
        'senderDomains': 1,
        'recipientDomains': 2,
        'totalMessages': 2,
        'dateRange': {'start': '2024-06-01', 'end': 'all'},
    }
