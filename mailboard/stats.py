import datetime
from collections import Counter

COMMON_STATUSES = ('sent', 'bounced', 'deferred', 'rejected')

ACTIVITY_PATTERNS = [
    ('relay access denied', 'security', 'sec', 'Relay access denied for a client.'),
    ('terminating on signal', 'system', 'sys', 'Postfix service was stopped or terminated.'),
    ('daemon started', 'system', 'sys', 'Postfix service started.'),
]


def compute_stats(transactions):
    statuses = Counter(t.status for t in transactions)
    result = {'total': len(transactions)}
    for status in COMMON_STATUSES:
        result[status] = statuses[status]
    result['statuses'] = dict(statuses)
    return result


def volume_trends(transactions):
    """Sent, bounced and deferred counts per calendar day, oldest day first."""
    by_day = {}
    for message in transactions:
        day = message.timestamp.date().isoformat()
        if day not in by_day:
            by_day[day] = {'date': day, 'sent': 0, 'bounced': 0, 'deferred': 0}
        if message.status in ('sent', 'bounced', 'deferred'):
            by_day[day][message.status] += 1
    return [by_day[day] for day in sorted(by_day)]


def recent_activity(transactions, now=None, limit=5):
    if now is None:
        now = datetime.datetime.now()
    since = now - datetime.timedelta(hours=24)

    activities = []
    for index, message in enumerate(t for t in transactions if t.timestamp > since):
        detail = message.detail.lower()
        for needle, activity_type, prefix, description in ACTIVITY_PATTERNS:
            if needle in detail:
                activities.append({
                    'id': '{}-{}'.format(prefix, index),
                    'timestamp': message.timestamp,
                    'type': activity_type,
                    'description': description,
                })
                break
    return activities[:limit]
