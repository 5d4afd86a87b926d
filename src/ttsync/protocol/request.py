""" Classes and methods implemented here implement the request/response
    aspects of the External Editor API.

    The host never answers on the connection a request was sent on. Every
    outbound message gets its own short-lived connection to the host, and
    everything the host has to say arrives on its own short-lived connection
    to a single listening socket owned by the :class:`Server`. Answers are
    therefore paired with requests by discriminant, never by connection.
"""

import logging
import queue
import socket
import threading

from .. import errors
from . import fields
from . import message


log = logging.getLogger(__name__)


def send(address, port, outbound):
    """ Open a new connection to *address* and *port*, write the encoded
        *outbound* :class:`message.Message`, and close the connection. This
        method does not wait for any answer. A refused connection means the
        host is not running, and is raised as a
        :class:`errors.ConnectionFailure`.
    """

    encoded = bytes(outbound)

    try:
        connection = socket.create_connection((address, port))
    except OSError as e:
        reason = 'cannot connect to the host (is it running?): ' + str(e)
        raise errors.ConnectionFailure(address, port, reason)

    try:
        connection.sendall(encoded)
        connection.shutdown(socket.SHUT_WR)
    except OSError as e:
        raise errors.ConnectionFailure(address, port, 'send failed: ' + str(e))
    finally:
        connection.close()

    log.debug("sent %s to %s:%d", outbound, address, port)



class Pending:
    """ A :class:`Pending` instance represents one outstanding request: the
        inbound discriminant that will answer it, and the synchronization
        needed for the caller to block until that answer arrives. The
        :class:`Server` completes or fails it from the listener thread.

        :ivar expects: The discriminant of the answer being waited for.
        :ivar response: The :class:`message.Answer`, once it arrives.
        :ivar error: The exception that ended the request, if any.
    """

    def __init__(self, expects):

        self.expects = expects
        self.response = None
        self.error = None
        self.event = threading.Event()


    def __repr__(self):
        return "request.Pending(expects=%r, done=%r)" % (self.expects, self.event.is_set())


    def _complete(self, response):
        """ Locally store the response and signal any callers blocking via
            :func:`wait` to proceed.
        """

        self.response = response
        self.event.set()


    def _fail(self, error):
        """ Locally store the *error* and signal any callers blocking via
            :func:`wait` to proceed; :func:`wait` will raise it.
        """

        self.error = error
        self.event.set()


    def poll(self):
        """ Return True if the request is complete, otherwise return False.
        """

        return self.event.is_set()


    def wait(self, timeout=None):
        """ Block until the request has been handled, and return the
            response. If the request failed the stored error is raised
            instead. The default *timeout* of None blocks indefinitely; if
            a timeout is given and expires, :class:`errors.RequestTimeout`
            is raised.
        """

        if self.event.wait(timeout):
            pass
        else:
            raise errors.RequestTimeout("no answer with discriminant %d within %.2fs" % (self.expects, timeout))

        if self.error is not None:
            raise self.error

        return self.response


# end of class Pending



class Server:
    """ Listen for inbound connections from the host and route what arrives.
        The listening socket is bound immediately, on *address* and *port*;
        failing to bind is raised as a :class:`errors.ConnectionFailure`,
        since nothing the host says could be received otherwise.

        Routing happens in the background listener thread:

        * an answer whose discriminant matches an outstanding
          :class:`Pending` request completes that request;
        * an error notification fails every outstanding request;
        * a malformed payload fails every outstanding request;
        * anything else is a notification, and is put on the :attr:`queue`
          for :func:`receive`.

        The same queue accepts arbitrary items via :func:`post`, so that
        other producers (such as a file watcher) can hand work to whoever
        is draining notifications, and have it processed on that thread.

        :ivar port: The port on which this server is listening.
    """

    read_timeout = 10

    def __init__(self, address, port):

        self.address = address
        self.port = int(port)

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        try:
            self.socket.bind((address, self.port))
            self.socket.listen()
        except OSError as e:
            self.socket.close()
            raise errors.ConnectionFailure(address, self.port, 'cannot listen: ' + str(e))

        # Port zero means the operating system picked one.
        self.port = self.socket.getsockname()[1]

        # The accept() call times out periodically so that the listener
        # thread notices a shutdown request.

        self.socket.settimeout(0.5)

        self.pending = list()
        self.pending_lock = threading.Lock()
        self.queue = queue.SimpleQueue()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def close(self):
        """ Stop the listener thread and release the listening socket. """

        self.shutdown = True
        self.thread.join()
        self.socket.close()


    def expect(self, expects):
        """ Register and return a new :class:`Pending` request that will be
            completed by the next answer with the discriminant *expects*.
            The request must be registered before the outbound message is
            sent, otherwise a fast answer could be mistaken for a
            notification.
        """

        pending = Pending(expects)

        self.pending_lock.acquire()
        self.pending.append(pending)
        self.pending_lock.release()

        return pending


    def forget(self, pending):
        """ Remove *pending* from the table of outstanding requests, if it is
            still present.
        """

        self.pending_lock.acquire()

        try:
            self.pending.remove(pending)
        except ValueError:
            pass
        finally:
            self.pending_lock.release()


    def _fail_pending(self, error):
        """ Fail every outstanding request with *error*. Returns True if
            there was at least one request to fail.
        """

        self.pending_lock.acquire()
        failed = self.pending
        self.pending = list()
        self.pending_lock.release()

        for pending in failed:
            pending._fail(error)

        return len(failed) > 0


    def _match_pending(self, answer):
        """ Return and remove the oldest outstanding request expecting the
            discriminant of *answer*, or None if there is no such request.
        """

        self.pending_lock.acquire()

        try:
            for pending in self.pending:
                if pending.expects == answer.discriminant:
                    self.pending.remove(pending)
                    return pending
        finally:
            self.pending_lock.release()

        return None


    def _incoming(self, raw):
        """ All inbound payloads are filtered through this method, which
            parses them and routes the result as described in the class
            documentation.
        """

        if raw == b'':
            log.debug('ignoring empty inbound connection')
            return

        try:
            answer = message.parse(raw)
        except errors.ProtocolError as e:
            if self._fail_pending(e):
                return

            log.error("discarding malformed payload: %s", e)
            return

        log.debug("received %r", answer)

        if answer.discriminant == fields.ERROR:
            if self._fail_pending(answer.exception()):
                return

        pending = self._match_pending(answer)

        if pending is None:
            self.queue.put(answer)
        else:
            pending._complete(answer)


    def _read(self, connection):
        """ Read an inbound connection to completion. The host writes one
            complete JSON document per connection, then closes it.
        """

        connection.settimeout(self.read_timeout)
        chunks = list()

        while True:
            chunk = connection.recv(65536)
            if chunk == b'':
                break
            chunks.append(chunk)

        return b''.join(chunks)


    def post(self, item):
        """ Put an arbitrary *item* on the notification queue. """

        self.queue.put(item)


    def receive(self, timeout=None):
        """ Return the next notification, blocking until one is available.
            If a *timeout* is given and expires, :class:`errors.RequestTimeout`
            is raised. Items handed to :func:`post` are returned as-is.
        """

        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            raise errors.RequestTimeout("no notification within %.2fs" % (timeout))


    def run(self):

        while self.shutdown == False:
            try:
                connection, remote = self.socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.shutdown == True:
                    break

                # The listening socket is unusable. Anyone waiting for an
                # answer, or draining the queue, needs to know about it.

                error = errors.ConnectionFailure(self.address, self.port, 'listener failed: ' + str(e))
                self._fail_pending(error)
                self.queue.put(error)
                break

            try:
                raw = self._read(connection)
            except OSError as e:
                error = errors.ProtocolError('incomplete inbound payload: ' + str(e))
                if self._fail_pending(error) == False:
                    log.error("%s", error)
                continue
            finally:
                connection.close()

            self._incoming(raw)


# end of class Server



class Client:
    """ Issue requests to the host listening on *address* and *port*. The
        answers are collected by the supplied *server*, which must already
        be listening.
    """

    def __init__(self, address, port, server):

        self.address = address
        self.port = int(port)
        self.server = server


    def send(self, outbound):
        """ Send the *outbound* :class:`message.Message` without waiting for
            any answer.
        """

        send(self.address, self.port, outbound)


    def request(self, outbound, timeout=None):
        """ Send the *outbound* :class:`message.Message` and block until the
            answer it expects arrives; the answer is returned. Messages the
            host never answers are sent, and None is returned immediately.
            Any error notification that arrives while waiting is raised as
            a :class:`errors.HostError`.
        """

        expects = outbound.expects

        if expects is None:
            self.send(outbound)
            return None

        pending = self.server.expect(expects)

        try:
            self.send(outbound)
            response = pending.wait(timeout)
        finally:
            self.server.forget(pending)

        return response


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
