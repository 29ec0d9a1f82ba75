# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Effective uid switching for accessing images on network storage.

Images on network storage domains are owned by the storage user (36 on
oVirt), and root is usually squashed by the server. Disks on these domains
must be opened with this effective uid.

The effective uid is process wide; only one elevated window may be active at
a time in a process, so concurrent sessions never observe each other's uid.
"""

from contextlib import contextmanager
import logging
import os
import threading

from vmstorage.common.config import config

_lock = threading.Lock()


class PrivilegeScope(object):
    """
    Run operations with the storage user effective uid, only while the
    manager reports an active network mount.
    """

    log = logging.getLogger("storage.PrivilegeScope")

    def __init__(self, manager, uid=None):
        self._manager = manager
        if uid is None:
            uid = config.getint("storage", "nfs_uid")
        self._uid = uid

    @property
    def uid(self):
        return self._uid

    @property
    def required(self):
        return self._manager.mounted

    @contextmanager
    def elevated(self):
        if not self.required:
            yield
            return

        with _lock:
            orig_uid = os.geteuid()
            self.log.debug("Setting euid = %s", self._uid)
            os.seteuid(self._uid)
            try:
                yield
            finally:
                self.log.debug("Resetting euid = %s", orig_uid)
                os.seteuid(orig_uid)

    def run(self, func, *args, **kwargs):
        with self.elevated():
            return func(*args, **kwargs)
