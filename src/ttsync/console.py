""" The console loop drains everything the host sends that is not the
    answer to a request, and shows it to the operator. In watch mode the
    same loop also runs every reconciliation pass, whether triggered by a
    file change or by the host reloading its save, so that passes never
    overlap.
"""

import logging
import sys

from . import errors
from . import reconcile
from .protocol import message


log = logging.getLogger(__name__)


class Console:
    """ Read from *host*, a :class:`host.Host` instance, until interrupted.
        If a *reconciler* is provided, :class:`reconcile.ChangeSet` items
        are reconciled as they arrive, and every time the host reports a
        completed reload the configured roots are reconciled as a whole.
        Notifications are written to *output*, standard output by default.
    """

    def __init__(self, host, reconciler=None, output=None):

        self.host = host
        self.reconciler = reconciler
        self.output = output


    def show(self, text):

        output = self.output

        if output is None:
            output = sys.stdout

        print(text, file=output, flush=True)


    def handle(self, item):
        """ Process a single *item* from the host queue. An exception
            instance means a background loop failed for good, and it is
            raised here.
        """

        if isinstance(item, BaseException):
            raise item

        if isinstance(item, reconcile.ChangeSet):
            self.reconcile(item)

        elif isinstance(item, message.Print):
            self.show(item.message)

        elif isinstance(item, message.Error):
            self.show(item.prefix + item.error)

        elif isinstance(item, message.ReloadComplete):
            self.show('loading complete')

            if self.reconciler is not None:
                roots = self.reconciler.configuration.roots
                self.reconcile(reconcile.ChangeSet(roots))

        else:
            log.debug("ignoring %s", item)


    def reconcile(self, changes):
        """ Run one reconciliation pass. A failed pass is reported, and the
            loop carries on with the next item.
        """

        if self.reconciler is None:
            log.debug("no reconciler, ignoring %r", changes)
            return

        try:
            self.reconciler.run(changes)
        except errors.SyncError as e:
            log.error("%s", e)


    def run(self):
        """ Handle items from the host queue forever. """

        while True:
            item = self.host.read()
            self.handle(item)


# end of class Console


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
