""" Console logging for the ttsync command line interface. Every message
    is a single line with a short, colored, lower-case level prefix:
    ``info: reloaded save``. Errors go to standard error, everything else
    to standard output.
"""

import logging
import sys


class ColoredFormatter(logging.Formatter):
    """ Prefix each message with its level name in lower case, colored for
        display on a terminal if *colors* is True.
    """

    COLORS = {
        'DEBUG': '\033[36m',        # Cyan
        'INFO': '\033[32m',         # Green
        'WARNING': '\033[33m',      # Yellow
        'ERROR': '\033[31m',        # Red
        'CRITICAL': '\033[35m',     # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, colors=True):
        logging.Formatter.__init__(self, fmt='%(message)s')
        self.colors = colors


    def format(self, record):

        formatted = logging.Formatter.format(self, record)
        prefix = record.levelname.lower() + ':'

        if self.colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
            prefix = color + prefix + reset

        return prefix + ' ' + formatted


# end of class ColoredFormatter



class _Below:
    """ Filter that only passes records below *level*. """

    def __init__(self, level):
        self.level = level


    def filter(self, record):
        return record.levelno < self.level


# end of class _Below



def _handler(stream):

    handler = logging.StreamHandler(stream)

    try:
        colors = stream.isatty()
    except (AttributeError, ValueError):
        colors = False

    handler.setFormatter(ColoredFormatter(colors))
    return handler



def configure(verbosity=0):
    """ Install the console handlers on the 'ttsync' logger. A *verbosity*
        of zero shows informational messages and above; anything higher
        also shows debug messages. Calling this again replaces the handlers
        installed previously.
    """

    if verbosity > 0:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logger = logging.getLogger('ttsync')
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stdout = _handler(sys.stdout)
    stdout.addFilter(_Below(logging.ERROR))
    logger.addHandler(stdout)

    stderr = _handler(sys.stderr)
    stderr.setLevel(logging.ERROR)
    logger.addHandler(stderr)

    # The file watcher is chatty at the debug level.
    logging.getLogger('watchdog').setLevel(logging.INFO)

    return logger


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
