import gzip
import logging

from mailboard.aggregator import aggregate
from mailboard.guesstimate import find_mail_log
from mailboard.parser import parse_line

logger = logging.getLogger(__name__)


def read_log_file(path):
    if path.endswith('.gz'):
        with gzip.open(path, 'rb') as handle:
            raw = handle.read()
    else:
        with open(path, 'rb') as handle:
            raw = handle.read()
    return raw.decode('utf-8', errors='replace')


def read_log_lines(log_path):
    try:
        files = find_mail_log(log_path)
    except OSError as e:
        logger.error('Error reading log files: %s', e)
        return []

    lines = []
    for file in files:
        try:
            content = read_log_file(file)
        except (OSError, EOFError) as e:
            logger.warning('Skipping %s: %s', file, e)
            continue
        lines.extend(content.split('\n'))
    return lines


def read_and_parse_logs(log_path, now=None):
    logger.info('Reading and parsing all log files...')
    parsed = []
    for line in read_log_lines(log_path):
        log_line = parse_line(line, now=now)
        if log_line is not None:
            parsed.append(log_line)
    logger.info('Successfully parsed %d log entries', len(parsed))
    return aggregate(parsed)
