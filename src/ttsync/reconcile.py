""" Reconciliation between files on disk and the save held by the host.

    The functions :func:`attach`, :func:`detach`, :func:`reload`,
    :func:`resolve_globals`, and :func:`check` never modify the
    :class:`save.Save` they are given, and never talk to the host. Each one
    works on a copy and returns a :class:`Pass` describing the result: the
    new save, whether anything changed, and what. The :class:`Reconciler`
    is the only piece that loads a save from the host and commits a result
    back to it.
"""

import logging
import os

from . import config
from . import errors
from . import files
from . import save
from . import tags


log = logging.getLogger(__name__)


class ChangeSet:
    """ The input for one reload pass: the absolute *paths* that changed,
        and an optional single target object *guid*.
    """

    def __init__(self, paths, guid=None):
        self.paths = files.reduce(paths)
        self.guid = guid


    def __repr__(self):
        return "reconcile.ChangeSet(%r, guid=%r)" % (self.paths, self.guid)


# end of class ChangeSet



class Change:
    """ One recorded modification. The *action* is one of 'added',
        'updated', or 'removed'; the *target* is the object (or the
        string 'Global') and the *detail* is the message shown to the
        operator.
    """

    def __init__(self, action, target, detail):
        self.action = action
        self.target = target
        self.detail = detail


    def __repr__(self):
        return "reconcile.Change(%r, %r, %r)" % (self.action, self.target, self.detail)


    def __str__(self):
        return "%s: %s" % (self.action, self.detail)


# end of class Change



class Pass:
    """ The result of a reconciliation step.

        :ivar save: The resulting :class:`save.Save`.
        :ivar changed: True if anything in the save was modified.
        :ivar changes: The list of :class:`Change` instances, in order.
        :ivar cleared: A set of (guid, namespace) pairs whose body was
            deliberately cleared.
        :ivar warnings: A list of warning messages for the operator.
    """

    def __init__(self, save):
        self.save = save
        self.changed = False
        self.changes = list()
        self.cleared = set()
        self.warnings = list()


    def __repr__(self):
        return "reconcile.Pass(changed=%r, %d changes, %d warnings)" % (self.changed, len(self.changes), len(self.warnings))


    def record(self, action, target, detail):
        self.changes.append(Change(action, target, detail))
        self.changed = True


    def warn(self, warning):
        self.warnings.append(warning)


    def extend(self, other):
        """ Return a new :class:`Pass` combining this one with *other*, a
            pass computed from this pass's save. The save of *other* wins.
        """

        combined = Pass(other.save)
        combined.changed = self.changed or other.changed
        combined.changes = self.changes + other.changes
        combined.cleared = self.cleared | other.cleared
        combined.warnings = self.warnings + other.warnings

        return combined


# end of class Pass



def attach(original, path, root, guids=None):
    """ Bind the file at *path* to the objects identified by *guids*, or to
        every object if no identifiers are given. The tag in the namespace
        implied by the file suffix is replaced, and the matching body is set
        to the file contents. Tag paths are relative to *root*.
    """

    tag = tags.from_path(path, root)
    contents = files.read(tag.target(root))

    result = Pass(original.copy())

    for target in result.save.select(guids):
        existing = target.tags
        replaced = existing.replace(tag)

        if replaced != existing:
            target.tags = replaced
            result.record('added', target, "'%s' as a tag to %s" % (tag, target))

        if target.body(tag.namespace) != contents:
            target.set_body(tag.namespace, contents)
            result.record('updated', target, "%s with tag '%s'" % (target, tag))

    return result



def detach(original, guids=None):
    """ Remove every valid script and UI tag from the objects identified by
        *guids*, or from every object, and clear both bodies. Foreign tags
        are kept.
    """

    result = Pass(original.copy())

    for target in result.save.select(guids):
        for namespace in tags.namespaces:
            existing = target.tags
            stripped = existing.strip(namespace)

            for tag in existing.matching(namespace):
                result.record('removed', target, "'%s' as a tag from %s" % (tag, target))

            if stripped != existing:
                target.tags = stripped

            if target.body(namespace):
                target.set_body(namespace, '')
                result.record('removed', target, "%s from %s" % (tags.labels[namespace], target))

            result.cleared.add((target.guid, namespace))

    return result



def reload(original, changed, root, guid=None):
    """ Refresh every object from the files its tags refer to. Only files
        under one of the *changed* paths are read again. An object with a
        body but no valid tag for it has that body cleared. If *guid* is
        specified only that object is considered.
    """

    result = Pass(original.copy())

    if guid is None:
        targets = result.save.objects
    else:
        targets = (result.save.find(guid),)

    for target in targets:
        for namespace in tags.namespaces:
            tag = target.valid_tag(namespace)
            body = target.body(namespace)
            label = tags.labels[namespace]

            if tag is None:
                if body:
                    target.set_body(namespace, '')
                    result.cleared.add((target.guid, namespace))
                    result.record('removed', target, "%s from %s" % (label, target))
                    result.warn("%s had a %s but no %s tag; the %s was removed" % (target, label, label, label))
                continue

            path = tag.target(root)

            if files.under(path, changed):
                pass
            else:
                continue

            contents = files.read(path)

            if contents != body:
                target.set_body(namespace, contents)
                result.record('updated', target, "%s with tag '%s'" % (target, tag))

    return result



def _global_sources(names, roots):
    """ Return the list of existing files among *names* under the *roots*.
        A root that is itself a file is a candidate if its name matches.
    """

    found = list()
    seen = set()

    for root in roots:
        if os.path.isfile(root):
            if os.path.basename(root) in names:
                candidates = (root,)
            else:
                candidates = ()
        else:
            candidates = list(os.path.join(root, name) for name in names)

        for candidate in candidates:
            if os.path.isfile(candidate):
                pass
            else:
                continue

            real = os.path.realpath(candidate)
            if real in seen:
                continue

            seen.add(real)
            found.append(candidate)

    return found



def resolve_globals(original, roots):
    """ Source the global script and UI from files under the *roots*:
        ``Global.lua`` or ``Global.ttslua`` for the script, ``Global.xml``
        for the UI. If no such file exists the stored global body is kept.
        More than one candidate for the same body is an
        :class:`errors.AmbiguousGlobal` error. An empty file is replaced
        with a placeholder comment, since the host would otherwise discard
        the body entirely.
    """

    result = Pass(original.copy())

    choices = list()
    choices.append((tags.SCRIPT, config.global_script_names, config.script_placeholder))
    choices.append((tags.UI, config.global_ui_names, config.ui_placeholder))

    for namespace, names, placeholder in choices:
        sources = _global_sources(names, roots)

        if len(sources) > 1:
            raise errors.AmbiguousGlobal(sources)

        if len(sources) == 0:
            continue

        source = sources[0]
        contents = files.read(source)

        if contents == '':
            contents = placeholder

        if contents != result.save.body(namespace):
            result.save.set_body(namespace, contents)
            result.record('updated', 'Global', "global %s from '%s'" % (tags.labels[namespace], os.path.basename(source)))

    return result



def check(original, cleared=()):
    """ Warn about every object that has a body with no valid tag for it,
        unless the body was cleared as part of the same pass. An object
        with more than one valid tag in a namespace raises
        :class:`errors.AmbiguousTag`. Nothing is modified.
    """

    result = Pass(original)

    for target in original.objects:
        for namespace in tags.namespaces:
            tag = target.valid_tag(namespace)

            if (target.guid, namespace) in cleared:
                continue

            if target.body(namespace) == '':
                continue

            if tag is None:
                label = tags.labels[namespace]
                result.warn("%s has a %s but no %s tag" % (target, label, label))

    return result



class Reconciler:
    """ Run reconciliation passes against the save currently loaded by the
        *host*, a :class:`host.Host` instance. The *configuration* provides
        the working root for tag paths, and the roots searched for global
        files.
    """

    def __init__(self, host, configuration):
        self.host = host
        self.configuration = configuration


    def load(self):
        """ Ask the host where its save lives, and read it. """

        answer = self.host.get_scripts()
        path = answer.save_path

        if path:
            pass
        else:
            raise errors.ProtocolError('the host did not report a save path')

        return save.load(path)


    def commit(self, result):
        """ Finish the pass *result*, a :class:`Pass`: the global bodies are
            sourced from the configured roots, and the consistency check is
            run. If anything changed, write the save back and have the host
            reload it. Returns True if a commit happened.
        """

        result = result.extend(resolve_globals(result.save, self.configuration.roots))
        result = result.extend(check(result.save, result.cleared))

        for warning in result.warnings:
            log.warning(warning)

        if result.changed == False:
            log.info('no changes')
            return False

        for change in result.changes:
            log.info("%s", change)

        result.save.write()
        self.host.reload(result.save.script_states())
        log.info('reloaded save')

        return True


    def attach(self, path, guids=None):
        """ Attach the file at *path* to the objects identified by *guids*,
            or to every object if no identifiers are provided.
        """

        current = self.load()
        root = self.configuration.root

        result = attach(current, path, root, guids)
        return self.commit(result)


    def detach(self, guids=None):
        """ Detach every script and UI file from the objects identified by
            *guids*, or from every object if no identifiers are provided.
        """

        current = self.load()

        result = detach(current, guids)
        return self.commit(result)


    def reload(self, paths=None, guid=None):
        """ Refresh every object whose tag refers to a file under *paths*,
            by default the configured roots. If *guid* is specified only
            that object is refreshed.
        """

        if paths is None:
            paths = self.configuration.roots

        changes = ChangeSet(paths, guid)
        return self.run(changes)


    def run(self, changes):
        """ Run one reload pass for the :class:`ChangeSet` *changes*. """

        log.debug("reconciling %r", changes)

        current = self.load()
        root = self.configuration.root

        result = reload(current, changes.paths, root, changes.guid)
        return self.commit(result)


    def backup(self, path):
        """ Copy the save currently loaded by the host to *path*. The
            destination always gets a .json extension. Returns the path
            actually written.
        """

        base, extension = os.path.splitext(path)
        path = base + '.json'

        answer = self.host.get_scripts()
        source = answer.save_path

        if source:
            pass
        else:
            raise errors.ProtocolError('the host did not report a save path')

        files.copy(source, path)
        log.info("save: '%s' as '%s'", os.path.basename(source), path)

        return path


# end of class Reconciler


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
