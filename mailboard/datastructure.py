UNKNOWN = 'N/A'
NO_DETAIL = 'No details available.'


class LogLine(object):
    def __init__(self, timestamp=None, hostname=None, process=None, pid=None, message=None, queue_id=None,
                 raw_line=None):
        self.timestamp = timestamp
        self.hostname = hostname
        self.process = process
        self.pid = pid
        self.message = message
        self.queue_id = queue_id
        self.raw_line = raw_line

    def __repr__(self):
        if self.queue_id:
            return '<LogLine {} {}>'.format(self.process, self.queue_id)
        else:
            return '<LogLine {}>'.format(self.process)


class Transaction(object):
    def __init__(self, queue_id, timestamp):
        self.id = queue_id
        self.timestamp = timestamp
        self.message_from = None
        self.message_to = None
        self.status = 'info'
        self.detail = ''
        self.lines = []

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'from': self.message_from,
            'to': self.message_to,
            'status': self.status,
            'detail': self.detail,
            'lines': self.lines[:],
        }

    def __repr__(self):
        return '<Transaction {} from {} to {} ({})>'.format(self.id, self.message_from, self.message_to,
                                                            self.status)
