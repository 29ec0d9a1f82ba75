# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import logging

from vmstorage.common import logutils
from vmstorage.storage import fileUtils
from vmstorage.storage import mount
from vmstorage.storage import storageServer

# Session states
IDLE = "idle"
MOUNTING = "mounting"
MOUNTED = "mounted"
FAILED_MOUNTING = "failed-mounting"
UNMOUNTED = "unmounted"


class MountLifecycleManager(object):
    """
    Establish and tear down the mounts registered in a MountRegistry.

    All mounts are placed under the registry mount root, created on first
    mount and removed on teardown. A failure while mounting unmounts
    everything mounted so far before the error is raised, so partial mounts
    are never left behind.
    """

    log = logging.getLogger("storage.MountLifecycleManager")

    def __init__(self, registry, connection_class=None, vm_id=None):
        self._registry = registry
        self._connection_class = (connection_class or
                                  storageServer.connection_class)
        self._state = IDLE
        self._mounted = False
        if vm_id is not None:
            self.log = logutils.SimpleLogAdapter(self.log, {"vm": vm_id})

    @property
    def registry(self):
        return self._registry

    @property
    def mount_root(self):
        return self._registry.mount_root

    @property
    def state(self):
        return self._state

    @property
    def mounted(self):
        """
        True if at least one network mount is established.
        """
        return self._mounted

    def establish_all(self):
        """
        Mount all registered storage domains in registration order.

        Returns True if storage was mounted, False if no mount is needed.

        Raises se.MountError (or the original error) on the first failure,
        after unmounting everything mounted so far.
        """
        self._mounted = False

        if self._registry.is_empty():
            self.log.info("Storage mount not needed")
            return False

        self._state = MOUNTING
        try:
            fileUtils.createdir(self.mount_root)
            for descriptor in self._registry.all():
                self.log.info("Mounting %s on %s for %s",
                              descriptor.uri, descriptor.mount_point,
                              descriptor.sd_id)
                con_class = self._connection_class(descriptor.type)
                con_class(descriptor).connect()
                self._mounted = True
        except Exception:
            self._state = FAILED_MOUNTING
            self.log.exception("Unable to mount all items from <%s>",
                               self.mount_root)
            self.teardown_all()
            raise

        self._state = MOUNTED
        self._log_mounts()
        return True

    def teardown_all(self):
        """
        Unmount all registered storage domains and remove the mount root.

        Failures are logged and never raised; every mount is attempted even
        if unmounting a previous one failed. Calling this again is a no-op.
        """
        if self._registry.is_empty():
            return

        self.log.warning("Unmount all items from <%s>", self.mount_root)
        try:
            for descriptor in self._registry.all():
                try:
                    con_class = self._connection_class(descriptor.type)
                    con_class.disconnect(descriptor.mount_point)
                except Exception as e:
                    self.log.warning(
                        "Failed to unmount %s from <%s>. Reason: <%s>",
                        descriptor.uri, descriptor.mount_point, e)
            fileUtils.cleanupdir(self.mount_root)
        except Exception as e:
            self.log.warning(
                "Failed to unmount all items from <%s>. Reason: <%s>",
                self.mount_root, e)
        finally:
            self._registry.clear()
            self._mounted = False
            self._state = UNMOUNTED

    def _log_mounts(self):
        try:
            mounts = list(mount.iterMounts(under=self.mount_root))
        except EnvironmentError as e:
            self.log.debug("Cannot read mounts: %s", e)
            return
        self.log.info("Mounts under <%s>: %s", self.mount_root, mounts)
