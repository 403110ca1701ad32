import re

from mailboard.datastructure import Transaction, UNKNOWN, NO_DETAIL

REGEX_FROM = re.compile(r'from=<([^>]+)>')
REGEX_TO = re.compile(r'to=<([^>]+)>')
REGEX_STATUS = re.compile(r'status=(\w+)')


class TransactionAggregator:
    """
    Folds parsed log lines into one Transaction per postfix queue id. Lines have
    to be fed in chronological order, later from/to/status values overwrite
    earlier ones.
    """

    def __init__(self):
        self.traces = {}

    def feed(self, log_line):
        if not log_line.queue_id:
            return

        if log_line.queue_id not in self.traces:
            self.traces[log_line.queue_id] = Transaction(log_line.queue_id, log_line.timestamp)
        message = self.traces[log_line.queue_id]
        message.lines.append(log_line.raw_line)

        part = REGEX_FROM.search(log_line.message)
        if part:
            message.message_from = part.group(1)

        # TODO: keep every recipient, postfix logs one to= line per recipient under the same queue id
        part = REGEX_TO.search(log_line.message)
        if part:
            message.message_to = part.group(1)

        part = REGEX_STATUS.search(log_line.message)
        if part:
            message.status = part.group(1).lower()
            message.detail = log_line.message
            message.timestamp = log_line.timestamp

    def results(self):
        result = []
        for message in self.traces.values():
            if not message.message_from and not message.message_to:
                continue
            message.message_from = message.message_from or UNKNOWN
            message.message_to = message.message_to or UNKNOWN
            if not message.detail:
                message.detail = message.lines[-1] if message.lines else NO_DETAIL
            result.append(message)

        result.sort(key=lambda m: m.timestamp, reverse=True)
        return result


def aggregate(log_lines):
    aggregator = TransactionAggregator()
    for log_line in log_lines:
        aggregator.feed(log_line)
    return aggregator.results()
