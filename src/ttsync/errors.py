""" Exception classes raised by ttsync. Every failure reported to the
    operator derives from :class:`SyncError`; the command line interface
    catches that one class, and only that class, to report a failure and
    exit with a non-zero status.
"""


class SyncError(Exception):
    """ Base class for all ttsync errors. """


class ConnectionFailure(SyncError):
    """ The host could not be reached, or the inbound listener could not
        be established. The *address* and *port* describe the endpoint
        involved.
    """

    def __init__(self, address, port, reason):
        self.address = address
        self.port = port
        self.reason = reason
        message = "%s:%d: %s" % (address, port, reason)
        SyncError.__init__(self, message)


class ProtocolError(SyncError):
    """ An inbound payload was not well-formed JSON, or did not carry
        a discriminant.
    """


class RequestTimeout(SyncError):
    """ A request did not receive its answer within an explicitly
        requested timeout.
    """


class HostError(SyncError):
    """ The host answered an outstanding request with an error
        notification instead of the expected response.
    """

    def __init__(self, error, guid=None, prefix=None):
        self.error = error
        self.guid = guid
        self.prefix = prefix

        if prefix:
            message = prefix + error
        else:
            message = error

        SyncError.__init__(self, message)


class AmbiguousTag(SyncError):
    """ An object carries more than one valid tag in a single namespace.
        Nothing picks one of them; the operator has to remove the extras.
    """

    def __init__(self, guid, namespace, tags):
        self.guid = guid
        self.namespace = namespace
        self.tags = tuple(tags)

        tags = ', '.join(str(tag) for tag in self.tags)
        message = "%s has multiple valid %s tags: %s" % (guid, namespace, tags)
        SyncError.__init__(self, message)


class AmbiguousGlobal(SyncError):
    """ More than one file could provide the same global body. """

    def __init__(self, paths):
        self.paths = tuple(paths)

        paths = ', '.join(str(path) for path in self.paths)
        message = 'multiple global sources exist: ' + paths
        SyncError.__init__(self, message)


class UnknownObject(SyncError):
    """ An explicitly requested object identifier is not in the save. """

    def __init__(self, guid):
        self.guid = guid
        SyncError.__init__(self, "%s does not exist" % (guid))


class FileFailure(SyncError):
    """ A file could not be read, written, or does not exist. """

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        SyncError.__init__(self, "%s: %s" % (path, reason))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
