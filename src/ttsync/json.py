''' Wrapper module around the :mod:`orjson` library to handle the equivalent
    of :func:`json.loads` and :func:`json.dumps`, both for messages on the
    wire and for save files on disk.
'''

import orjson


# orjson.dumps returns bytes. Anything written to a socket or a file is
# written as bytes, so every 'dumps' variant here does the same.

loads = orjson.loads
JSONDecodeError = orjson.JSONDecodeError


def dumps(value):
    return orjson.dumps(value)



def dumps_pretty(value):
    ''' Encode *value* with two-space indentation and a trailing newline,
        which is how the host writes its own save files.
    '''

    options = orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE
    return orjson.dumps(value, option=options)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
