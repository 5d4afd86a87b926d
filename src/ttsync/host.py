""" The :class:`Host` is the single point of contact with the running host
    application. It owns the inbound listener for the lifetime of the
    session, and provides one method per External Editor API request.
"""

import logging

from . import config
from .protocol import message
from .protocol import request


log = logging.getLogger(__name__)


class Host:
    """ Connect to the host described by *configuration*, a
        :class:`config.Configuration` instance; the default configuration
        is used if none is provided. The inbound listener is bound
        immediately, and a :class:`errors.ConnectionFailure` is raised if
        that is not possible.

        Every method that waits for an answer accepts an optional *timeout*
        in seconds; the default is to wait indefinitely.
    """

    def __init__(self, configuration=None):

        if configuration is None:
            configuration = config.Configuration()

        self.configuration = configuration

        address = configuration.address
        self.server = request.Server(address, configuration.listen_port)
        self.client = request.Client(address, configuration.host_port, self.server)

        log.debug("listening on %s:%d", address, self.server.port)


    def __enter__(self):
        return self


    def __exit__(self, *exception):
        self.close()


    def close(self):
        """ Stop listening for the host. """
        self.server.close()


    def get_scripts(self, timeout=None):
        """ Ask the host for the current save; the returned
            :class:`message.ReloadComplete` carries the save path and the
            script state of every object.
        """

        return self.client.request(message.GetScripts(), timeout)


    def reload(self, script_states, timeout=None):
        """ Send the *script_states*, a list of dictionaries with 'guid',
            'script', and 'ui' keys, and wait for the host to reload the
            save. The resulting :class:`message.ReloadComplete` is returned.
        """

        return self.client.request(message.Reload(script_states), timeout)


    def custom_message(self, value):
        """ Forward the dictionary *value* to the running game. The host
            does not answer.
        """

        self.client.send(message.CustomMessage(value))


    def execute(self, script, guid=config.global_guid, timeout=None):
        """ Run *script* on the object *guid*, or globally if no *guid* is
            specified, and return the decoded result. An error raised by
            the script is raised here as a :class:`errors.HostError`.
        """

        answer = self.client.request(message.Execute(script, guid), timeout)
        return answer.value


    def read(self, timeout=None):
        """ Return the next unsolicited notification from the host, or any
            item handed to :func:`post`.
        """

        return self.server.receive(timeout)


    def post(self, item):
        """ Add *item* to the same queue read by :func:`read`. """
        self.server.post(item)


# end of class Host


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
