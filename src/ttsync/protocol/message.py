""" A class representation of External Editor API messages: the outbound
    messages sent to the host, and the closed set of inbound answers and
    notifications the host sends back.
"""

from .. import config
from .. import errors
from .. import json
from . import fields


class Message:
    """ The :class:`Message` provides a very thin encapsulation of an
        outbound message. Every outbound message is a single JSON document
        carrying the class *discriminant*, along with any fields present
        in the *payload* dictionary.

        :ivar expects: The inbound discriminant that answers this message,
            or None if the host does not answer it.
        :ivar payload: Message-specific fields, as a dictionary.
    """

    discriminant = None
    expects = None
    label = 'Message'

    def __init__(self, payload=None):

        if self.discriminant is None:
            raise TypeError('Message is abstract, use a subclass')

        if payload is None:
            payload = dict()

        self.payload = payload
        self.encoded = None


    def __bytes__(self):
        return self._finalize()


    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.payload)


    def __str__(self):
        return self.label


    def _finalize(self):
        """ Encode this :class:`Message` as the bytes that will be written
            to the wire. The encoding is cached; the payload is not expected
            to change after the first transmission.
        """

        encoded = self.encoded

        if encoded is None:
            document = dict()
            document[fields.DISCRIMINANT] = self.discriminant
            document.update(self.payload)

            encoded = json.dumps(document)
            self.encoded = encoded

        return encoded


# end of class Message



class GetScripts(Message):
    """ Request the save path and the script state of every object. The
        host answers with a :class:`ReloadComplete`.
    """

    discriminant = fields.GET_SCRIPTS
    expects = fields.RELOAD_COMPLETE
    label = 'Get Scripts'

    def __init__(self):
        Message.__init__(self)


# end of class GetScripts



class Reload(Message):
    """ Update the script and UI of every object listed in *script_states*,
        then reload the save, the same way it happens when pressing
        "Save & Play" in the host's own editor. Any object listed has both
        its script and its UI replaced; a missing or empty value deletes
        the corresponding body. The host answers with a
        :class:`ReloadComplete`.
    """

    discriminant = fields.RELOAD
    expects = fields.RELOAD_COMPLETE
    label = 'Reload'

    def __init__(self, script_states):

        payload = dict()
        payload[fields.SCRIPT_STATES] = list(script_states)
        Message.__init__(self, payload)


# end of class Reload



class CustomMessage(Message):
    """ Forward *value* to the ``onExternalMessage`` event handler of the
        currently loaded game. The value has to be a dictionary (a table,
        in host terms); the host does not answer.
    """

    discriminant = fields.CUSTOM_MESSAGE
    label = 'Custom Message'

    def __init__(self, value):

        if isinstance(value, dict):
            pass
        else:
            raise TypeError('a custom message must be a dictionary')

        payload = dict()
        payload[fields.CUSTOM] = value
        Message.__init__(self, payload)


# end of class CustomMessage



class Execute(Message):
    """ Execute *script* on the object identified by *guid*; the default
        guid, :data:`config.global_guid`, runs the script globally. The host
        answers with a :class:`Return` carrying the same *return_id*.

        Replies are matched to requests by their discriminant, never by
        *return_id*, so the value only has to be echoed back; it defaults
        to the :class:`Return` discriminant itself.
    """

    discriminant = fields.EXECUTE
    expects = fields.RETURN
    label = 'Execute'

    def __init__(self, script, guid=config.global_guid, return_id=fields.RETURN):

        payload = dict()
        payload[fields.RETURN_ID] = int(return_id)
        payload[fields.GUID] = str(guid)
        payload[fields.SCRIPT] = str(script)
        Message.__init__(self, payload)


# end of class Execute



class Answer:
    """ An :class:`Answer` is anything the host sends to us, whether it is
        the response to a request or an unsolicited notification. The
        original decoded JSON document is retained as the *payload*; the
        subclasses expose the fields relevant to each kind.
    """

    discriminant = None
    label = 'Answer'

    def __init__(self, payload):
        self.payload = payload


    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.payload)


    def __str__(self):
        return self.label


# end of class Answer



class NewObject(Answer):
    """ Sent when the operator opens the scripting editor in the host for
        an object that has no script yet.
    """

    discriminant = fields.NEW_OBJECT
    label = 'New Object'

    @property
    def script_states(self):
        return self.payload.get(fields.SCRIPT_STATES, [])


# end of class NewObject



class ReloadComplete(Answer):
    """ Sent after a game is loaded, and in response to both
        :class:`GetScripts` and :class:`Reload`. It carries the path to
        the save file on disk, and the script state of every object.
    """

    discriminant = fields.RELOAD_COMPLETE
    label = 'Reload'

    @property
    def save_path(self):
        return self.payload.get(fields.SAVE_PATH)


    @property
    def script_states(self):
        return self.payload.get(fields.SCRIPT_STATES, [])


    def script_state(self, guid):
        """ Return the script state dictionary for *guid*, or None if
            there is no such entry.
        """

        for state in self.script_states:
            if state.get(fields.GUID) == guid:
                return state

        return None


# end of class ReloadComplete



class Print(Answer):
    """ Every ``print()`` call in a host script is relayed as a
        :class:`Print` notification.
    """

    discriminant = fields.PRINT
    label = 'Print'

    @property
    def message(self):
        return self.payload.get(fields.MESSAGE, '')


# end of class Print



class Error(Answer):
    """ Every script error in the host is relayed as an :class:`Error`
        notification. If a request is outstanding when one arrives, it is
        treated as the failure of that request.
    """

    discriminant = fields.ERROR
    label = 'Error'

    @property
    def error(self):
        return self.payload.get(fields.ERROR_TEXT, '')


    @property
    def guid(self):
        return self.payload.get(fields.GUID)


    @property
    def prefix(self):
        return self.payload.get(fields.ERROR_PREFIX, '')


    def exception(self):
        """ Return a :class:`errors.HostError` describing this error. """
        return errors.HostError(self.error, self.guid, self.prefix)


# end of class Error



class CustomNotification(Answer):
    """ Sent whenever a host script calls ``sendExternalMessage``. """

    discriminant = fields.CUSTOM_NOTIFICATION
    label = 'Custom Message'

    @property
    def value(self):
        return self.payload.get(fields.CUSTOM)


# end of class CustomNotification



class Return(Answer):
    """ The result of an :class:`Execute` request. The host can only return
        strings; scripts are expected to ``JSON.encode()`` anything else,
        and :func:`value` decodes it again when possible.
    """

    discriminant = fields.RETURN
    label = 'Return'

    @property
    def return_id(self):
        return self.payload.get(fields.RETURN_ID)


    @property
    def raw(self):
        return self.payload.get(fields.RETURN_VALUE)


    @property
    def value(self):

        raw = self.raw

        if isinstance(raw, str):
            pass
        else:
            return raw

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw


# end of class Return



class GameSaved(Answer):
    """ Sent whenever the operator saves the game in the host. """

    discriminant = fields.GAME_SAVED
    label = 'Game Saved'


# end of class GameSaved



class ObjectCreated(Answer):
    """ Sent whenever an object is created in the host. """

    discriminant = fields.OBJECT_CREATED
    label = 'Object Created'

    @property
    def guid(self):
        return self.payload.get(fields.GUID)


# end of class ObjectCreated



class Unrecognized(Answer):
    """ Any well-formed answer whose discriminant is not one of the known
        kinds. Newer host versions may add notification kinds; they are
        carried along rather than rejected.
    """

    label = 'Unrecognized'

    def __init__(self, payload):
        Answer.__init__(self, payload)
        self.discriminant = payload.get(fields.DISCRIMINANT)


    def __str__(self):
        return "%s (%r)" % (self.label, self.discriminant)


# end of class Unrecognized



answers = dict()

for answer in (NewObject, ReloadComplete, Print, Error, CustomNotification, Return, GameSaved, ObjectCreated):
    answers[answer.discriminant] = answer

del answer



def parse(raw):
    """ Interpret the raw bytes received on an inbound connection and return
        the matching :class:`Answer` instance. A
        :class:`errors.ProtocolError` is raised if the payload is not a JSON
        object, or if it is missing an integer discriminant.
    """

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise errors.ProtocolError('inbound payload is not valid JSON: ' + str(e))

    if isinstance(document, dict):
        pass
    else:
        raise errors.ProtocolError('inbound payload is not a JSON object: ' + repr(document))

    try:
        discriminant = document[fields.DISCRIMINANT]
    except KeyError:
        raise errors.ProtocolError("inbound payload has no '%s' field" % (fields.DISCRIMINANT))

    if isinstance(discriminant, bool) or not isinstance(discriminant, int):
        raise errors.ProtocolError("inbound '%s' is not an integer: %r" % (fields.DISCRIMINANT, discriminant))

    try:
        answer_class = answers[discriminant]
    except KeyError:
        return Unrecognized(document)

    return answer_class(document)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
