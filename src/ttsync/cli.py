""" Command line interface for ttsync. This is the only place where a
    :class:`errors.SyncError` is caught: it is reported on standard error,
    and the process exits with a non-zero status.
"""

import argparse
import logging
import os
import re

from . import config
from . import console
from . import errors
from . import host
from . import log
from . import reconcile
from . import watch


logger = logging.getLogger(__name__)

guid_pattern = re.compile(r'^[0-9A-Za-z]{6}$')


def guid(value):
    if guid_pattern.match(value):
        return value
    raise argparse.ArgumentTypeError("%r is not a valid guid" % (value))


def path_is_file(value):
    if os.path.isfile(value):
        return value
    raise argparse.ArgumentTypeError("%r is not a file" % (value))


def path_exists(value):
    if os.path.exists(value):
        return value
    raise argparse.ArgumentTypeError("%r does not exist" % (value))


def path_is_json(value):
    if os.path.splitext(value)[1] == '.json':
        return value
    raise argparse.ArgumentTypeError("%r is not a .json file" % (value))



def parser():
    """ Return the :class:`argparse.ArgumentParser` for the ttsync command.
    """

    description = 'Synchronize scripts and UI files on disk with the save loaded in Tabletop Simulator.'
    top = argparse.ArgumentParser(prog='ttsync', description=description)

    top.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Show debug output.')

    commands = top.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    attach = commands.add_parser('attach', help='Attach a script or UI file to one or more objects.')
    attach.add_argument(
        'path',
        metavar='FILE',
        type=path_is_file,
        help='File to attach; its path relative to the current directory becomes the tag.')
    attach.add_argument(
        'guids',
        metavar='GUID',
        nargs='*',
        type=guid,
        help='Objects to attach the file to (default: every object).')

    detach = commands.add_parser('detach', help='Detach script and UI files from one or more objects.')
    detach.add_argument(
        'guids',
        metavar='GUID',
        nargs='*',
        type=guid,
        help='Objects to detach (default: every object).')

    reload = commands.add_parser('reload', help='Update scripts and UI from files and reload the save.')
    reload.add_argument(
        'paths',
        metavar='PATH',
        nargs='*',
        type=path_exists,
        help='Files or directories to reload from (default: the current directory).')
    reload.add_argument(
        '--id',
        dest='guid',
        type=guid,
        default=None,
        help='Only reload the object with this guid.')

    watcher = commands.add_parser('watch', help='Reload whenever files change, and show host messages.')
    watcher.add_argument(
        'paths',
        metavar='PATH',
        nargs='*',
        type=path_exists,
        help='Files or directories to watch (default: the current directory).')

    commands.add_parser('console', help='Show print and error messages from the host.')

    backup = commands.add_parser('backup', help='Copy the currently loaded save to a file.')
    backup.add_argument(
        'path',
        type=path_is_json,
        help='Destination; must end in .json.')

    return top



def run(arguments):
    """ Execute the command described by the parsed *arguments*. """

    roots = getattr(arguments, 'paths', None)
    if not roots:
        roots = None

    configuration = config.Configuration(roots)
    command = arguments.command

    with host.Host(configuration) as connection:
        reconciler = reconcile.Reconciler(connection, configuration)

        if command == 'attach':
            reconciler.attach(arguments.path, arguments.guids)

        elif command == 'detach':
            reconciler.detach(arguments.guids)

        elif command == 'reload':
            reconciler.reload(configuration.roots, arguments.guid)

        elif command == 'backup':
            reconciler.backup(arguments.path)

        elif command == 'console':
            console.Console(connection).run()

        elif command == 'watch':
            watcher = watch.Watcher(configuration.roots, connection.post, configuration.debounce)
            watcher.start()

            try:
                console.Console(connection, reconciler).run()
            finally:
                watcher.stop()

        else:
            raise ValueError('unhandled command: ' + repr(command))



def main(argv=None):

    arguments = parser().parse_args(argv)
    log.configure(arguments.verbose)

    try:
        run(arguments)
    except errors.SyncError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 0

    return 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
