import re
import datetime

from mailboard.datastructure import LogLine

REGEX_TIMESTAMP = re.compile(r'^(?:(\w{3}\s+\d+\s+\d{2}:\d{2}:\d{2})|([0-9T:.\-+]+))\s+')
REGEX_SYSLOG_TIMESTAMP = re.compile(r'(\w{3})\s+(\d+)\s+(\d{2}):(\d{2}):(\d{2})')
REGEX_POSTFIX_HEADER = re.compile(r'(\S+)\s+postfix/(\w+)\[(\d+)\]:\s+(.*)')
REGEX_QUEUE_ID = re.compile(r'^([A-F0-9]{10,})')

MONTHS = {'Jan': 1, 'Feb': 2, 'Mar': 3, 'Apr': 4, 'May': 5, 'Jun': 6,
          'Jul': 7, 'Aug': 8, 'Sep': 9, 'Oct': 10, 'Nov': 11, 'Dec': 12}


def parse_iso_timestamp(text):
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        result = datetime.datetime.fromisoformat(text)
        if result.tzinfo is not None:
            # Everything else is naive local time, keep them comparable
            result = result.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None
    return result


def parse_syslog_timestamp(text, now=None):
    part = REGEX_SYSLOG_TIMESTAMP.match(text)
    if not part:
        return None
    month = MONTHS.get(part.group(1))
    if month is None:
        return None

    if now is None:
        now = datetime.datetime.now()

    # Syslog has no year, entries from a month later than now are from last year
    year = now.year
    if month > now.month:
        year -= 1

    try:
        return datetime.datetime(year, month, int(part.group(2)), int(part.group(3)), int(part.group(4)),
                                 int(part.group(5)))
    except (ValueError, OverflowError):
        return None


def parse_timestamp(text, now=None):
    """
    Resolve a log timestamp in either syslog ("Oct 19 12:00:01") or ISO-8601 form
    into a naive datetime. Returns None when it can't be resolved.
    """
    result = parse_iso_timestamp(text)
    if result is not None:
        return result
    return parse_syslog_timestamp(text, now=now)


def parse_line(line, now=None):
    """
    Turn one raw mail.log line into a LogLine. Anything that is not a postfix log
    line with a valid timestamp gives None, this never raises on bad input.
    """
    if not isinstance(line, str):
        return None
    line = line.rstrip('\r\n')

    stamp = REGEX_TIMESTAMP.match(line)
    if not stamp:
        return None

    timestamp = parse_timestamp(stamp.group(1) or stamp.group(2), now=now)
    if timestamp is None:
        return None

    part = REGEX_POSTFIX_HEADER.match(line[stamp.end():])
    if not part:
        return None

    message = part.group(4)
    queue_id = REGEX_QUEUE_ID.match(message)

    return LogLine(timestamp=timestamp,
                   hostname=part.group(1),
                   process=part.group(2),
                   pid=int(part.group(3)),
                   message=message,
                   queue_id=queue_id.group(1) if queue_id else None,
                   raw_line=line)
