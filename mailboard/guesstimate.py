"""
Works out where postfix keeps its logs and config. Rotated logs are found next to the
main log by file name prefix.
"""
import os

DEFAULT_MAIL_LOG = '/var/log/mail.log'
DEFAULT_POSTFIX_CONFIG = '/etc/postfix/main.cf'


def find_mail_log(log_path=DEFAULT_MAIL_LOG):
    log_dir = os.path.dirname(log_path) or '.'
    prefix = os.path.basename(log_path)
    logs = [os.path.join(log_dir, name) for name in os.listdir(log_dir) if name.startswith(prefix)]
    logs.sort(reverse=True)
    return logs


def find_postfix_config(config_path=None):
    return config_path or DEFAULT_POSTFIX_CONFIG
