""" Python implementation of ttsync. This keeps script and UI files on disk
    consistent with the save loaded by a running Tabletop Simulator host,
    using the host's External Editor API.
"""

# Utility components.

from . import json
from . import errors
from . import files
from . import log

# Submodules used by multiple other components.

from . import config
from . import protocol
from . import tags
from . import save

# Primary public-facing interfaces.

from .host import Host
from .reconcile import Reconciler
from . import reconcile
from . import console
from . import watch

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
