""" Watch the synchronized roots for file changes. Bursts of filesystem
    events are collapsed into a single :class:`reconcile.ChangeSet` once
    things have been quiet for the debounce window; the change set is then
    handed off, and never reconciled here.
"""

import logging
import os
import threading

import watchdog.events
import watchdog.observers

from . import config
from . import errors
from . import files
from . import reconcile


log = logging.getLogger(__name__)


class Debouncer:
    """ Background thread to collect paths until no new path has arrived
        for *window* seconds, and then invoke *deliver* with a
        :class:`reconcile.ChangeSet` of everything collected.
    """

    def __init__(self, deliver, window=config.debounce):

        self.deliver = deliver
        self.window = float(window)
        self.paths = set()
        self.lock = threading.Lock()
        self.shutdown = False

        self.alarm = threading.Event()
        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def add(self, path):
        """ Add *path* to the pending set, and restart the quiet window. """

        self.lock.acquire()
        self.paths.add(path)
        self.lock.release()

        self.alarm.set()


    def stop(self):
        self.shutdown = True
        self.alarm.set()
        self.thread.join()


    def run(self):

        while True:
            self.alarm.wait()

            if self.shutdown == True:
                break

            # Every new path sets the alarm again. Keep waiting until a full
            # window passes without it being set.

            while True:
                self.alarm.clear()

                if self.alarm.wait(self.window):
                    if self.shutdown == True:
                        break
                    continue
                else:
                    break

            if self.shutdown == True:
                break

            self.lock.acquire()
            paths = self.paths
            self.paths = set()
            self.lock.release()

            if len(paths) == 0:
                continue

            log.debug("%d changed path(s) after debounce", len(paths))
            self.deliver(reconcile.ChangeSet(paths))


        # Infinite loop exited.


# end of class Debouncer



class Handler(watchdog.events.FileSystemEventHandler):
    """ Forward file creation and modification events under the *roots* to
        the *debouncer*. Directory events, moves, and deletions are ignored.
    """

    def __init__(self, roots, debouncer):
        watchdog.events.FileSystemEventHandler.__init__(self)
        self.roots = roots
        self.debouncer = debouncer


    def _forward(self, event):

        if event.is_directory:
            return

        path = os.path.abspath(os.fsdecode(event.src_path))

        if files.under(path, self.roots):
            log.debug("%s: %s", event.event_type, path)
            self.debouncer.add(path)


    def on_created(self, event):
        self._forward(event)


    def on_modified(self, event):
        self._forward(event)


# end of class Handler



class Watcher:
    """ Watch every path in *roots* and pass each debounced
        :class:`reconcile.ChangeSet` to *deliver*. Directories are watched
        recursively; a root that is a single file is watched on its own.
        Nothing happens until :func:`start` is called.
    """

    def __init__(self, roots, deliver, window=config.debounce):

        self.roots = files.reduce(roots)
        self.deliver = deliver
        self.window = window
        self.debouncer = None
        self.observer = None


    def start(self):
        """ Begin watching. A :class:`errors.FileFailure` is raised if any
            root cannot be watched.
        """

        self.debouncer = Debouncer(self.deliver, self.window)
        handler = Handler(self.roots, self.debouncer)
        self.observer = watchdog.observers.Observer()

        for root in self.roots:
            if os.path.exists(root):
                pass
            else:
                self.debouncer.stop()
                raise errors.FileFailure(root, 'no such file or directory')

            if os.path.isdir(root):
                watched = root
                recursive = True
            else:
                watched = os.path.dirname(root)
                recursive = False

            try:
                self.observer.schedule(handler, watched, recursive=recursive)
            except OSError as e:
                self.debouncer.stop()
                raise errors.FileFailure(root, 'cannot watch: ' + str(e))

        try:
            self.observer.start()
        except OSError as e:
            self.debouncer.stop()
            raise errors.FileFailure(', '.join(self.roots), 'cannot watch: ' + str(e))

        for root in self.roots:
            log.info("watching %s", root)


    def stop(self):

        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None

        if self.debouncer is not None:
            self.debouncer.stop()
            self.debouncer = None


# end of class Watcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
