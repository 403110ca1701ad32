import logging
import os

from dotenv import dotenv_values

from mailboard.guesstimate import DEFAULT_MAIL_LOG, DEFAULT_POSTFIX_CONFIG


class Config(object):
    def __init__(self, log_path=DEFAULT_MAIL_LOG, config_path=DEFAULT_POSTFIX_CONFIG, log_level='info'):
        self.log_path = log_path
        self.config_path = config_path
        self.log_level = log_level

    def __repr__(self):
        return '<Config log={} config={}>'.format(self.log_path, self.config_path)


def load_config(environ=None, env_file='.env'):
    if environ is None:
        # Real environment variables take precedence over the .env file
        environ = dict(dotenv_values(env_file)) if env_file else {}
        environ.update(os.environ)
    return Config(log_path=environ.get('POSTFIX_LOG_PATH') or DEFAULT_MAIL_LOG,
                  config_path=environ.get('POSTFIX_CONFIG_PATH') or DEFAULT_POSTFIX_CONFIG,
                  log_level=environ.get('LOG_LEVEL') or 'info')


def setup_logging(level='info'):
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO),
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
