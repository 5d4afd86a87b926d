""" Small filesystem helpers. Every failure is raised as a
    :class:`errors.FileFailure` naming the offending path.
"""

import os
import shutil

from . import errors


def read(path):
    """ Return the contents of the file at *path* as text. Scripts and UI
        markup are always UTF-8.
    """

    try:
        reader = open(path, 'r', encoding='utf-8', newline='')
    except FileNotFoundError:
        raise errors.FileFailure(path, 'no such file')
    except OSError as e:
        raise errors.FileFailure(path, e.strerror)

    try:
        contents = reader.read()
    except OSError as e:
        raise errors.FileFailure(path, e.strerror)
    except UnicodeDecodeError:
        raise errors.FileFailure(path, 'not a UTF-8 text file')
    finally:
        reader.close()

    return contents



def copy(source, destination):
    """ Copy the file at *source* to *destination*, overwriting it. """

    try:
        shutil.copyfile(source, destination)
    except FileNotFoundError:
        raise errors.FileFailure(source, 'no such file')
    except OSError as e:
        raise errors.FileFailure(destination, e.strerror)



def under(path, roots):
    """ Return True if *path* is one of the *roots*, or is contained by any
        of them. All paths are expected to be absolute.
    """

    path = os.path.normpath(path)

    for root in roots:
        root = os.path.normpath(root)

        if path == root:
            return True

        if path.startswith(root.rstrip(os.sep) + os.sep):
            return True

    return False



def reduce(paths):
    """ Return the absolute *paths* as a sorted tuple, without duplicates
        and without any path that is already covered by another one in the
        list.
    """

    unique = set()

    for path in paths:
        unique.add(os.path.normpath(os.path.abspath(path)))

    reduced = list()

    # Sorting guarantees a parent directory is seen before anything it
    # contains.

    for path in sorted(unique):
        if under(path, reduced):
            continue

        reduced.append(path)

    return tuple(reduced)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
