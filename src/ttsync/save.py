""" In-memory representation of a save file written by the host. Only the
    handful of fields relevant to synchronization are interpreted; every
    other field is carried along untouched, in its original order, and
    written back exactly as it was read.
"""

import copy
import logging
import os

from . import config
from . import errors
from . import json
from . import tags
from .protocol import fields


log = logging.getLogger(__name__)


# Keys used by the host in its save files.

SAVE_NAME = 'SaveName'
SCRIPT = 'LuaScript'
UI = 'XmlUI'
OBJECTS = 'ObjectStates'

GUID = 'GUID'
NICKNAME = 'Nickname'
NAME = 'Name'
TAGS = 'Tags'

bodies = dict()
bodies[tags.SCRIPT] = SCRIPT
bodies[tags.UI] = UI


def _get(document, key):
    value = document.get(key)

    if value is None:
        return ''

    return value


def _set(document, key, value):
    """ Set *key* to *value*, without introducing a key that was not
        present in the original document unless the value is non-empty.
    """

    if key in document or value:
        document[key] = value



class Object:
    """ One entry of the save's object list. The *state* is the dictionary
        decoded from the save file; it is modified in place.
    """

    def __init__(self, state):
        self.state = state


    def __repr__(self):
        return "save.Object(%r)" % (self.guid)


    def __str__(self):
        nickname = self.nickname

        if nickname:
            return "%s (%s)" % (self.guid, nickname)

        return self.guid


    @property
    def guid(self):
        return _get(self.state, GUID)


    @property
    def nickname(self):
        return _get(self.state, NICKNAME)


    @property
    def name(self):
        return _get(self.state, NAME)


    @property
    def script(self):
        return _get(self.state, SCRIPT)


    @script.setter
    def script(self, value):
        _set(self.state, SCRIPT, value)


    @property
    def ui(self):
        return _get(self.state, UI)


    @ui.setter
    def ui(self, value):
        _set(self.state, UI, value)


    @property
    def tags(self):
        strings = self.state.get(TAGS)

        if strings is None:
            strings = ()

        return tags.Tags(strings)


    @tags.setter
    def tags(self, value):
        _set(self.state, TAGS, list(value))


    def body(self, namespace):
        """ Return the script or UI body, depending on *namespace*. """
        return _get(self.state, bodies[namespace])


    def set_body(self, namespace, value):
        _set(self.state, bodies[namespace], value)


    def valid_script_tag(self):
        """ Return the single valid script tag, None if there is none, or
            raise :class:`errors.AmbiguousTag` if there are several.
        """

        return self.tags.valid(tags.SCRIPT, self.guid)


    def valid_ui_tag(self):
        """ Return the single valid UI tag, None if there is none, or
            raise :class:`errors.AmbiguousTag` if there are several.
        """

        return self.tags.valid(tags.UI, self.guid)


    def valid_tag(self, namespace):
        return self.tags.valid(namespace, self.guid)


    def replace_tag(self, tag):
        """ Remove every existing tag in the namespace of *tag*, leaving any
            foreign tags alone, and append *tag*.
        """

        self.tags = self.tags.replace(tag)


    def script_state(self):
        """ Return this object as an entry for a reload request. """

        state = dict()
        state[fields.GUID] = self.guid
        state[fields.SCRIPT] = self.script
        state[fields.UI] = self.ui

        return state


# end of class Object



class Save:
    """ A save file, as decoded from disk. The *document* is the decoded
        JSON object; *path* is where it was read from, and where
        :func:`write` puts it back by default.
    """

    def __init__(self, document, path=None):

        if isinstance(document, dict):
            pass
        else:
            raise errors.FileFailure(path, 'not a save file: top level is not an object')

        objects = document.get(OBJECTS)

        if objects is None:
            objects = list()
        elif isinstance(objects, list):
            pass
        else:
            raise errors.FileFailure(path, "not a save file: '%s' is not a list" % (OBJECTS))

        for state in objects:
            if isinstance(state, dict):
                pass
            else:
                raise errors.FileFailure(path, "not a save file: malformed entry in '%s'" % (OBJECTS))

        self.document = document
        self.path = path
        self.objects = list(Object(state) for state in objects)


    def __repr__(self):
        return "save.Save(%r, %d objects)" % (self.name, len(self.objects))


    @property
    def name(self):
        return _get(self.document, SAVE_NAME)


    @property
    def script(self):
        return _get(self.document, SCRIPT)


    @script.setter
    def script(self, value):
        _set(self.document, SCRIPT, value)


    @property
    def ui(self):
        return _get(self.document, UI)


    @ui.setter
    def ui(self, value):
        _set(self.document, UI, value)


    def body(self, namespace):
        return _get(self.document, bodies[namespace])


    def set_body(self, namespace, value):
        _set(self.document, bodies[namespace], value)


    def copy(self):
        """ Return an independent copy of this :class:`Save`. """
        return Save(copy.deepcopy(self.document), self.path)


    def find(self, guid):
        """ Return the :class:`Object` identified by *guid*, or raise
            :class:`errors.UnknownObject` if there is no such object.
        """

        for target in self.objects:
            if target.guid == guid:
                return target

        raise errors.UnknownObject(guid)


    def select(self, guids=None):
        """ Return the objects identified by *guids*, in the order given, or
            every object if no identifiers are provided. Every identifier is
            checked before anything is returned.
        """

        if not guids:
            return list(self.objects)

        selected = list()

        for guid in guids:
            target = self.find(guid)
            if target in selected:
                continue
            selected.append(target)

        return selected


    def script_states(self):
        """ Return the list of script states for a reload request: the
            global state first, followed by every object in save order.
        """

        states = list()

        state = dict()
        state[fields.GUID] = config.global_guid
        state[fields.SCRIPT] = self.script
        state[fields.UI] = self.ui
        states.append(state)

        for target in self.objects:
            states.append(target.script_state())

        return states


    def write(self, path=None):
        """ Write the save back to disk, to *path* if specified, otherwise
            to the path it was read from. The file is replaced atomically:
            a partially written save is never visible to the host.
        """

        if path is None:
            path = self.path

        if path is None:
            raise errors.FileFailure(None, 'no path to write the save to')

        encoded = json.dumps_pretty(self.document)

        directory = os.path.dirname(os.path.abspath(path))
        temporary = os.path.join(directory, '.' + os.path.basename(path) + '.ttsync')

        try:
            with open(temporary, 'wb') as writer:
                writer.write(encoded)

            os.replace(temporary, path)
        except OSError as e:
            try:
                os.remove(temporary)
            except FileNotFoundError:
                pass

            raise errors.FileFailure(path, e.strerror)

        log.debug("wrote %d bytes to %s", len(encoded), path)


# end of class Save



def load(path):
    """ Read and decode the save file at *path*, returning a :class:`Save`.
    """

    try:
        reader = open(path, 'rb')
    except FileNotFoundError:
        raise errors.FileFailure(path, 'no such save file')
    except OSError as e:
        raise errors.FileFailure(path, e.strerror)

    try:
        raw = reader.read()
    except OSError as e:
        raise errors.FileFailure(path, e.strerror)
    finally:
        reader.close()

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise errors.FileFailure(path, 'not a save file: ' + str(e))

    log.debug("read save from %s", path)
    return Save(document, path)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
