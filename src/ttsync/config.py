""" Fixed defaults for talking to the host, and the :class:`Configuration`
    class describing one ttsync session: which roots are synchronized, which
    directory tags are relative to, and which local ports are used.
"""

import os


# The External Editor API uses two fixed localhost ports: the host listens
# on one of them for our requests, and we listen on the other for anything
# the host has to say.

address = '127.0.0.1'
host_port = 39999
listen_port = 39998

# Seconds of quiet required before a burst of filesystem events is
# forwarded for reconciliation.

debounce = 0.5

# File names that provide the save-wide global script and UI.

global_script_names = ('Global.lua', 'Global.ttslua')
global_ui_names = ('Global.xml',)

# The host treats an empty global body as a request to delete it; an empty
# file is replaced with one of these instead.

script_placeholder = '-- intentionally left empty'
ui_placeholder = '<!-- intentionally left empty -->'

# Identifier the host uses for the save-wide (global) script state.

global_guid = '-1'


class Configuration:
    """ A :class:`Configuration` collects the settings for a single session.
        The *roots* are the paths being synchronized (files or directories);
        the *root* is the working directory that tag paths are relative to,
        and defaults to the current directory. The remaining arguments
        default to the module-level values above.
    """

    def __init__(self, roots=None, root=None, address=address, host_port=host_port, listen_port=listen_port, debounce=debounce):

        if root is None:
            root = os.getcwd()

        root = os.path.abspath(root)

        if roots is None or len(roots) == 0:
            roots = (root,)

        resolved = list()
        for path in roots:
            path = os.path.join(root, path)
            path = os.path.abspath(path)

            if path in resolved:
                continue

            resolved.append(path)

        self.root = root
        self.roots = tuple(resolved)
        self.address = address
        self.host_port = int(host_port)
        self.listen_port = int(listen_port)
        self.debounce = float(debounce)


    def __repr__(self):
        return "config.Configuration(root=%r, roots=%r, ports=%d/%d)" % (self.root, self.roots, self.host_port, self.listen_port)


# end of class Configuration


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
