import datetime

from mailboard.aggregator import aggregate
from mailboard.stats import compute_stats, recent_activity, volume_trends

from conftest import make_line


def build(*entries):
    lines = []
    for index, (status, timestamp) in enumerate(entries):
        queue_id = 'ABCDEF{:04d}'.format(index)
        lines.append(make_line('{}: from=<a@example.com>, status={}'.format(queue_id, status), timestamp, queue_id))
    return aggregate(lines)


def test_compute_stats():
    day = datetime.datetime(2024, 6, 1)
    result = compute_stats(build(('sent', day), ('sent', day), ('bounced', day), ('expired', day)))
    assert result['total'] == 4
    assert result['sent'] == 2
    assert result['bounced'] == 1
    assert result['deferred'] == 0
    assert result['rejected'] == 0
    assert result['statuses']['expired'] == 1


def test_compute_stats_empty():
    assert compute_stats([]) == {'total': 0, 'sent': 0, 'bounced': 0, 'deferred': 0, 'rejected': 0,
                                 'statuses': {}}


def test_volume_trends_sorted_by_day():
    result = volume_trends(build(('sent', datetime.datetime(2024, 6, 2, 10)),
                                 ('deferred', datetime.datetime(2024, 6, 1, 10)),
                                 ('sent', datetime.datetime(2024, 6, 2, 11)),
                                 ('rejected', datetime.datetime(2024, 6, 2, 12))))
    assert result == [
        {'date': '2024-06-01', 'sent': 0, 'bounced': 0, 'deferred': 1},
        {'date': '2024-06-02', 'sent': 2, 'bounced': 0, 'deferred': 0},
    ]


def test_recent_activity(now):
    lines = [
        make_line('AAAAAAAAAA: from=<a@b.c>', now - datetime.timedelta(hours=1), 'AAAAAAAAAA'),
        make_line('AAAAAAAAAA: reject: RCPT from x[1.2.3.4]: 554 5.7.1 Relay access denied; status=rejected',
                  now - datetime.timedelta(hours=1), 'AAAAAAAAAA'),
        make_line('BBBBBBBBBB: from=<a@b.c>, status=sent (Relay access denied)',
                  now - datetime.timedelta(hours=30), 'BBBBBBBBBB'),
        make_line('CCCCCCCCCC: from=<a@b.c>, status=sent (250 OK)', now - datetime.timedelta(hours=2), 'CCCCCCCCCC'),
    ]
    result = recent_activity(aggregate(lines), now=now)
    assert len(result) == 1
    assert result[0]['type'] == 'security'
    assert result[0]['id'] == 'sec-0'
    assert result[0]['description'] == 'Relay access denied for a client.'
