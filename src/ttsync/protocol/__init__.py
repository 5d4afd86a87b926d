from . import fields
from . import message
from . import request


"""
ttsync Protocol Layer
=====================

This package implements the External Editor API spoken by the host: a
connectionless request/response protocol over localhost TCP, where every
message travels on its own short-lived connection.

---------------------------------------------------------------------

Layer Overview
--------------

Host facade (ttsync.host)
    get_scripts(), reload(), custom_message(), execute(), read()

    │
    ▼
Request handling (request.py)
    Client: one outbound connection per message
    Server: the single inbound listener; pairs answers with pending
            requests by discriminant, queues everything else

    │
    ▼
Message model (message.py)
    Outbound Message classes, inbound Answer variants, parse()

    │
    ▼
Field vocabulary (fields.py)
    Discriminants and payload keys

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
