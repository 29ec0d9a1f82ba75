# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Access to the disks of a single VM.

A VmStorageSession resolves the paths of the VM disks, mounts the network
storage domains holding them, and opens the disks with the effective uid
required by network storage. Mounts stay until unmount() is called::

    with VmStorageSession(vm_id, hypervisor, opener=open_disks) as session:
        cfg = session.resolve_all_disk_paths()
        disks = session.open_disks(disk_files(cfg))
        ...

The hypervisor object provides list_storage_domains() and
list_vm_disks(vm_id). Both may return records from vmstorage.storage.sd or
dicts in the hypervisor representation.
"""

import logging
import os

from vmstorage.common import logutils
from vmstorage.common.config import config
from vmstorage.storage import exception as se
from vmstorage.storage import mountManager
from vmstorage.storage import mountRegistry
from vmstorage.storage import privilege
from vmstorage.storage import resolver
from vmstorage.storage import sd
from vmstorage.storage import sdc

DISK_TAG = "scsi0:%d"


def mount_root_for(vm_id):
    return os.path.join(config.get("storage", "mount_root_base"), vm_id)


class VmStorageSession(object):

    log = logging.getLogger("vmstorage.VmStorageSession")

    def __init__(self, vm_id, hypervisor, opener=None, unmounter=None,
                 mount_root=None, connection_class=None):
        """
        Arguments:
            vm_id (str): The VM id, used to derive the mount root.
            hypervisor: Source of storage domains and disks.
            opener (callable): Called with the disk files by open_disks().
            unmounter (callable): Called with no arguments by unmount(),
                before unmounting the storage.
            mount_root (str): Use this mount root instead of the one
                derived from vm_id.
            connection_class (callable): Return the connection class for a
                storage type, for testing.
        """
        self._vm_id = vm_id
        self._hypervisor = hypervisor
        self._opener = opener
        self._unmounter = unmounter
        if mount_root is None:
            mount_root = mount_root_for(vm_id)

        self.index = sdc.StorageDomainIndex(hypervisor)
        self.registry = mountRegistry.MountRegistry(mount_root)
        self.manager = mountManager.MountLifecycleManager(
            self.registry, connection_class=connection_class, vm_id=vm_id)
        self.privilege = privilege.PrivilegeScope(self.manager)
        self.resolver = resolver.DiskPathResolver(self.index, self.registry)
        self.log = logutils.SimpleLogAdapter(self.log, {"vm": vm_id})

    @property
    def vm_id(self):
        return self._vm_id

    @property
    def mount_root(self):
        return self.registry.mount_root

    def list_disks(self):
        try:
            disks = list(self._hypervisor.list_vm_disks(self._vm_id))
        except Exception as e:
            raise se.DomainLookupError(
                "Cannot list VM disks", vm=self._vm_id, error=str(e)) from e

        return [d if isinstance(d, sd.Disk) else sd.Disk.from_dict(d)
                for d in disks]

    def resolve_all_disk_paths(self):
        """
        Return the disks configuration::

            {"scsi0:0.present": "true",
             "scsi0:0.devicetype": "disk",
             "scsi0:0.filename": "/dev/sd-id/image-id",
             "scsi0:0.format": "raw",
             ...}

        The tag index is the disk position in the VM disks list. Disks
        without a storage domain are skipped.
        """
        cfg = {}
        for idx, disk in enumerate(self.list_disks()):
            self.log.debug("Disk %s", disk)
            try:
                path = self.resolver.resolve_disk(disk)
            except se.UnassignedStorageDomain as e:
                if disk.storage_domain_id is None:
                    self.log.info("Disk <%s> is skipped due to unassigned "
                                  "storage domain", disk.name or disk.id)
                else:
                    self.log.warning("Disk <%s> is skipped: %s",
                                     disk.name or disk.id, e)
                continue

            tag = DISK_TAG % idx
            cfg[tag + ".present"] = "true"
            cfg[tag + ".devicetype"] = "disk"
            cfg[tag + ".filename"] = path
            cfg[tag + ".format"] = disk.format
        return cfg

    def open_disks(self, disk_files):
        """
        Mount the storage needed by the disks and open them. The storage
        stays mounted until unmount() is called.
        """
        if self._opener is None:
            raise RuntimeError("No disk opener for VM %s" % self._vm_id)

        self.manager.establish_all()
        return self.privilege.run(self._opener, disk_files)

    def unmount(self):
        try:
            if self._unmounter is not None:
                self._unmounter()
        finally:
            self.manager.teardown_all()

    def __enter__(self):
        return self

    def __exit__(self, t, v, tb):
        self.unmount()
