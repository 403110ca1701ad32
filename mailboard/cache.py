import logging
import os
import time

from mailboard.reader import read_and_parse_logs

logger = logging.getLogger(__name__)


class LogCache:
    """
    Holds the last aggregated transactions together with the modification time of
    the log they were built from. One instance per running process.
    """

    def __init__(self):
        self.transactions = []
        self.source_modified_at = None

    def get_or_refresh(self, current_modified_at, recompute):
        if self.source_modified_at is None or current_modified_at > self.source_modified_at:
            self.transactions = recompute()
            self.source_modified_at = current_modified_at
        else:
            logger.debug('Serving logs from cache.')
        return self.transactions

    def invalidate(self):
        self.transactions = []
        self.source_modified_at = None


def get_transactions(config, cache):
    def recompute():
        return read_and_parse_logs(config.log_path)

    try:
        modified_at = os.stat(config.log_path).st_mtime
    except FileNotFoundError:
        if not cache.transactions:
            logger.warning('Main log not found, trying to parse rotated logs...')
            cache.transactions = recompute()
            cache.source_modified_at = time.time()
        return cache.transactions
    except OSError as e:
        logger.error('Error checking log file status: %s', e)
        return cache.transactions

    if cache.source_modified_at is not None and modified_at > cache.source_modified_at:
        logger.info('Log file changed, re-parsing...')
    return cache.get_or_refresh(modified_at, recompute)
