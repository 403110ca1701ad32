"""
Read and rewrite the mynetworks setting of the postfix main.cf
"""
import errno
import logging
import re

logger = logging.getLogger(__name__)

REGEX_IPV4 = re.compile(r'^(\d{1,3}\.){3}\d{1,3}(/\d{1,2})?$')
REGEX_HOSTNAME = re.compile(r'^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$')
REGEX_IPV6 = re.compile(r'^\[?[0-9a-fA-F:]+\]?(/\d{1,3})?$')
REGEX_SEPARATOR = re.compile(r'[\s,]+')
REGEX_MYNETWORKS = re.compile(r'^\s*mynetworks\s*=')


class NetworkConfigError(Exception):
    pass


def _is_mynetworks(line):
    return REGEX_MYNETWORKS.match(line) is not None


def is_valid_network(network):
    network = network.strip()
    if not network:
        return False
    return bool(REGEX_IPV4.match(network) or REGEX_HOSTNAME.match(network) or REGEX_IPV6.match(network))


def _describe(e, config_path):
    if e.errno in (errno.EACCES, errno.EPERM):
        return 'Permission denied. Cannot access {}, please check file permissions.'.format(config_path)
    if e.errno == errno.ENOENT:
        return 'Config file not found at {}, please check POSTFIX_CONFIG_PATH.'.format(config_path)
    return 'Could not access postfix config file {}: {}'.format(config_path, e)


def _read(config_path):
    try:
        with open(config_path) as handle:
            return handle.read()
    except OSError as e:
        logger.error('Error reading postfix config: %s', e)
        raise NetworkConfigError(_describe(e, config_path)) from e


def read_networks(config_path):
    for line in _read(config_path).split('\n'):
        if _is_mynetworks(line):
            value = line.split('=', 1)[1]
            return [n for n in REGEX_SEPARATOR.split(value.strip()) if n]
    return []


def update_networks(config_path, networks):
    valid = [n.strip() for n in networks if is_valid_network(n)]
    if not valid:
        raise NetworkConfigError('No valid networks provided')

    setting = 'mynetworks = {}'.format(' '.join(valid))
    lines = _read(config_path).split('\n')
    found = False
    for index, line in enumerate(lines):
        if _is_mynetworks(line):
            lines[index] = setting
            found = True
    if not found:
        lines.append(setting)

    try:
        with open(config_path, 'w') as handle:
            handle.write('\n'.join(lines))
    except OSError as e:
        logger.error('Error updating postfix config: %s', e)
        raise NetworkConfigError(_describe(e, config_path)) from e

    logger.info('Updated mynetworks: %s', ' '.join(valid))
    return valid
