import logging

from ipsetctl.config import DEBUG

TRACE = logging.DEBUG - 5


def setup(debug: bool = DEBUG):
    if not hasattr(logging, 'TRACE'):
        add_level('TRACE', TRACE)

    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s.%(msecs)03d %(levelname)s %(module)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S')


def add_level(name, num, method=None):
    """Register level `num` as `name` and add a `logger.<method>()` helper.

    Used by `setup()` for the TRACE level, at which the 'call' logger
    reports the stderr captured from each ipset run. Refuses to overwrite
    an existing attribute of `logging` or of the logger class.

    >>> add_level('TRACE', TRACE)
    >>> logging.getLogger('call').trace('Stderr: %s', 'ipset v7.17: ...')
    """
    if not method:
        method = name.lower()

    if hasattr(logging, name):
        raise AttributeError('{} already defined in logging module'.format(name))
    if hasattr(logging, method):
        raise AttributeError('{} already defined in logging module'.format(method))
    if hasattr(logging.getLoggerClass(), method):
        raise AttributeError('{} already defined in logger class'.format(method))

    def log_for_level(self, message, *args, **kwargs):
        if self.isEnabledFor(num):
            self._log(num, message, args, **kwargs)

    def log_to_root(message, *args, **kwargs):
        logging.log(num, message, *args, **kwargs)

    logging.addLevelName(num, name)
    setattr(logging, name, num)
    setattr(logging.getLoggerClass(), method, log_for_level)
    setattr(logging, method, log_to_root)
