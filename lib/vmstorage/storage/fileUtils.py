# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
File system helper module
"""

import errno
import logging
import os
import stat

from vmstorage.common import address

log = logging.getLogger('storage.fileUtils')

MIN_PORT = 1
MAX_PORT = 65535


def transformPath(remotePath):
    """
    Transform remote path to new one for local mount
    """
    return remotePath.replace('_', '__').replace('/', '_')


def normalize_path(path):
    """
    Normalizes any path using fileUtils.normpath.
    The input's form can be:
    1. Remote path - "server:port:/path", where:
        - The "port:" part is not mandatory.
        - The "server" part can be a dns name, an ipv4 address
        or an ipv6 address using quoted form.
        Since this format is ambiguous, we treat an input that looks like a
        port as a port, and otherwise as a path without a leading slash.
    2. Local path - "/path/to/device"
    3. Other, where we just call os.path.normpath.
    """
    if path.startswith("/") or ":" not in path:
        return normpath(path)

    host, tail = address.hosttail_split(path)
    if ":" in tail:
        port, path = tail.split(':', 1)
        if is_port(port):
            tail = port + ":" + normpath(path)
        else:
            tail = normpath(tail)
    else:
        tail = normpath(tail)
    return address.hosttail_join(host, tail)


def normpath(path):
    """
    Normalize file system path.

    POSIX allows both /path and //path. The second slash may be interpreted in
    an implementation-defined manner. The Linux interpretation seems to be to
    ignore the double slash, so it seems to be safe to remove it.

    See https://bugs.python.org/issue26329 for more info.
    """
    path = os.path.normpath(path)
    if path.startswith('//'):
        path = path[1:]
    return path


def is_port(port_str):
    if port_str.startswith('0'):
        return False
    try:
        port = int(port_str)
        return MIN_PORT <= port <= MAX_PORT
    except ValueError:
        return False


def cleanupdir(dirPath, ignoreErrors=True):
    """
    Recursively remove all the files and directories in the given directory.

    Directories which are still mount points are not entered; they are
    reported as errors and left in place together with their parents. A
    missing directory is not an error.
    """
    cleanupdir_errors = []

    def logit(e):
        cleanupdir_errors.append('%s: %s' % (e.filename, e))

    def remove(func, path):
        try:
            func(path)
        except OSError as e:
            logit(e)

    log.info("Removing directory: %s", dirPath)
    if not os.path.lexists(dirPath):
        log.debug("Directory %s does not exist", dirPath)
        return

    visited = []
    for root, dirs, files in os.walk(dirPath, onerror=logit):
        for name in dirs[:]:
            path = os.path.join(root, name)
            if os.path.islink(path):
                dirs.remove(name)
                remove(os.unlink, path)
            elif os.path.ismount(path):
                dirs.remove(name)
                cleanupdir_errors.append('%s: still mounted' % path)
        for name in files:
            remove(os.unlink, os.path.join(root, name))
        visited.append(root)

    # Children were visited after their parents.
    for path in reversed(visited):
        remove(os.rmdir, path)

    if cleanupdir_errors:
        log.warning("Errors removing directory %s: %s",
                    dirPath, cleanupdir_errors)
        if not ignoreErrors:
            raise RuntimeError("%s %s" % (dirPath, cleanupdir_errors))


def createdir(dirPath, mode=None):
    """
    Recursively create directory if doesn't exist

    If already exists check that it is a directory.
    """
    if mode is not None:
        mode = stat.S_IMODE(mode)
        params = (dirPath, mode)
    else:
        params = (dirPath,)

    log.info("Creating directory: %s mode: %s", dirPath,
             mode if mode is None else oct(mode))
    try:
        os.makedirs(*params)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise
        statinfo = os.stat(dirPath)
        if not stat.S_ISDIR(statinfo.st_mode):
            raise OSError(errno.ENOTDIR, "Not a directory %s" % dirPath)
        log.debug("Using existing directory: %s", dirPath)
