""" Tags bind files on disk to objects in a save. A tag is a plain string
    on the object; the ones ttsync cares about follow one of two naming
    conventions:

    * ``lua/<path>`` names a script file, where *path* ends in ``.lua`` or
      ``.ttslua``;
    * ``xml/<path>`` names a UI markup file, where *path* ends in ``.xml``.

    The *path* is relative to the working root and uses forward slashes.
    Only the prefix and suffix decide validity: ``lua/../shared/util.lua``
    is a valid tag for a file outside the root. Any tag that does not
    follow either convention is *foreign*; foreign tags are never modified.
"""

import os

from . import errors


SCRIPT = 'lua'
UI = 'xml'

namespaces = (SCRIPT, UI)

suffixes = dict()
suffixes[SCRIPT] = ('.lua', '.ttslua')
suffixes[UI] = ('.xml',)

# Used in messages to the operator.

labels = dict()
labels[SCRIPT] = 'script'
labels[UI] = 'ui'


def valid(namespace, path):
    """ Return True if *namespace* and *path* together describe a valid tag.
        This is the only place tag validity is decided.
    """

    try:
        allowed = suffixes[namespace]
    except KeyError:
        return False

    for suffix in allowed:
        if path.endswith(suffix) and len(path) > len(suffix):
            break
    else:
        return False

    return True



def namespace(path):
    """ Return the namespace implied by the suffix of *path*, or None if the
        suffix is not one ttsync synchronizes.
    """

    for candidate in namespaces:
        if path.endswith(suffixes[candidate]):
            return candidate

    return None



def parse(text):
    """ Return the :class:`Tag` described by the string *text*, or None if
        *text* is a foreign tag.
    """

    if isinstance(text, str):
        pass
    else:
        return None

    try:
        prefix, path = text.split('/', 1)
    except ValueError:
        return None

    if valid(prefix, path):
        return Tag(prefix, path)

    return None



def from_path(path, root):
    """ Return the :class:`Tag` for the file at *path*, relative to the
        working directory *root*. A :class:`errors.FileFailure` is raised if
        the file is outside the root, or is not a script or UI file.
    """

    absolute = os.path.abspath(os.path.join(root, path))
    relative = os.path.relpath(absolute, os.path.abspath(root))
    relative = relative.replace(os.sep, '/')

    if relative == '..' or relative.startswith('../'):
        raise errors.FileFailure(path, 'not inside ' + root)

    kind = namespace(relative)

    if kind is None:
        raise errors.FileFailure(path, 'not a script (.lua, .ttslua) or UI (.xml) file')

    if valid(kind, relative):
        pass
    else:
        raise errors.FileFailure(path, 'cannot be expressed as a tag')

    return Tag(kind, relative)



class Tag:
    """ A valid tag, as a structured (*namespace*, *path*) pair. Instances
        are only created for valid combinations; use :func:`parse` or
        :func:`from_path` rather than calling this directly.
    """

    def __init__(self, namespace, path):

        if valid(namespace, path):
            pass
        else:
            raise ValueError("not a valid tag: %r, %r" % (namespace, path))

        self.namespace = namespace
        self.path = path


    def __eq__(self, other):
        if isinstance(other, Tag):
            return self.namespace == other.namespace and self.path == other.path
        return NotImplemented


    def __hash__(self):
        return hash((self.namespace, self.path))


    def __repr__(self):
        return "tags.Tag(%r, %r)" % (self.namespace, self.path)


    def __str__(self):
        return self.namespace + '/' + self.path


    def target(self, root):
        """ Return the absolute path of the file this tag refers to. """

        parts = self.path.split('/')
        return os.path.abspath(os.path.join(root, *parts))


# end of class Tag



class Tags:
    """ The ordered list of tag strings carried by one object. Valid and
        foreign tags live side by side; any modification returns a new
        :class:`Tags` instance and leaves foreign tags exactly as they were.
    """

    def __init__(self, strings=()):
        self.strings = list(strings)


    def __eq__(self, other):
        if isinstance(other, Tags):
            return self.strings == other.strings
        return NotImplemented


    def __iter__(self):
        return iter(self.strings)


    def __len__(self):
        return len(self.strings)


    def __repr__(self):
        return "tags.Tags(%r)" % (self.strings)


    def __str__(self):
        return ', '.join(str(string) for string in self.strings)


    def matching(self, namespace):
        """ Return a list of every valid :class:`Tag` in *namespace*. """

        matches = list()

        for string in self.strings:
            tag = parse(string)

            if tag is None:
                continue

            if tag.namespace == namespace:
                matches.append(tag)

        return matches


    def foreign(self):
        """ Return a list of every tag string that is not a valid tag. """

        foreign = list()

        for string in self.strings:
            if parse(string) is None:
                foreign.append(string)

        return foreign


    def valid(self, namespace, guid=None):
        """ Return the single valid :class:`Tag` in *namespace*, or None if
            there is no such tag. More than one is an
            :class:`errors.AmbiguousTag` error, reported against the object
            identified by *guid*.
        """

        matches = self.matching(namespace)

        if len(matches) == 0:
            return None

        if len(matches) == 1:
            return matches[0]

        raise errors.AmbiguousTag(guid, labels[namespace], matches)


    def strip(self, namespace):
        """ Return a copy with every valid tag in *namespace* removed. """

        kept = list()

        for string in self.strings:
            tag = parse(string)

            if tag is not None and tag.namespace == namespace:
                continue

            kept.append(string)

        return Tags(kept)


    def replace(self, tag):
        """ Return a copy with every valid tag in the namespace of *tag*
            removed, and *tag* appended.
        """

        replaced = self.strip(tag.namespace)
        replaced.strings.append(str(tag))
        return replaced


# end of class Tags


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
