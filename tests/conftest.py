import datetime

import pytest

from mailboard.datastructure import LogLine

NOW = datetime.datetime(2024, 6, 15, 12, 0, 0)


def make_line(message, timestamp, queue_id=None, process='smtpd'):
    raw = '{:%b %d %H:%M:%S} mail postfix/{}[100]: {}'.format(timestamp, process, message)
    return LogLine(timestamp=timestamp, hostname='mail', process=process, pid=100, message=message,
                   queue_id=queue_id, raw_line=raw)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_log():
    return [
        'Jun 14 09:00:00 mail postfix/smtpd[100]: connect from client.example.com[10.0.0.5]',
        'Jun 14 09:00:01 mail postfix/smtpd[100]: 1A2B3C4D5E: client=client.example.com[10.0.0.5]',
        'Jun 14 09:00:02 mail postfix/qmgr[200]: 1A2B3C4D5E: from=<alice@example.com>, size=1024, nrcpt=1 (queue active)',
        'Jun 14 09:00:03 mail postfix/smtp[300]: 1A2B3C4D5E: to=<bob@example.org>, relay=mx.example.org[203.0.113.9]:25, '
        'dsn=2.0.0, status=sent (250 OK)',
        'Jun 15 10:00:01 mail postfix/smtpd[101]: 2B3C4D5E6F: client=unknown[10.0.0.6]',
        'Jun 15 10:00:02 mail postfix/qmgr[200]: 2B3C4D5E6F: from=<carol@example.com>, size=2048, nrcpt=1 (queue active)',
        'Jun 15 10:00:03 mail postfix/smtp[301]: 2B3C4D5E6F: to=<dave@example.net>, relay=none, '
        'dsn=4.4.1, status=deferred (connect to example.net timed out)',
        'Jun 15 11:00:00 mail postfix/master[1]: daemon started -- version 3.6.4',
        'Jun 15 11:00:01 mail dovecot: imap-login: Login: user=<bob>',
        'this is not a log line',
        '',
    ]
