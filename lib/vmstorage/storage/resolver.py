# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import logging
import os

from vmstorage.common import constants
from vmstorage.storage import exception as se
from vmstorage.storage import sd


class DiskPathResolver(object):
    """
    Compute the path of a disk from its storage domain.

    Disks on network domains (NFS, GlusterFS) are reached through a mount
    registered in the registry::

        <mount_point>/<sd_id>/images/<disk_id>/<image_id>

    Disks on any other domain are reached as block devices::

        /dev/<sd_id>/<image_id or disk_id>
    """

    log = logging.getLogger("storage.DiskPathResolver")

    def __init__(self, index, registry):
        self._index = index
        self._registry = registry
        self._resolvers = {
            sd.NFS_DOMAIN: self._file_path,
            sd.GLUSTERFS_DOMAIN: self._file_path,
            sd.OTHER_DOMAIN: self._block_path,
        }

    def resolve_disk(self, disk):
        """
        Return the path of disk, looking up its storage domain.

        Raises se.UnassignedStorageDomain if the disk has no storage domain,
        or the domain is unknown to the hypervisor.
        """
        if disk.storage_domain_id is None:
            raise se.UnassignedStorageDomain(disk=disk.name or disk.id)

        domain = self._index.lookup(disk.storage_domain_id)
        if domain is None:
            raise se.UnassignedStorageDomain(
                "Unknown storage domain", disk=disk.name or disk.id,
                sd_id=disk.storage_domain_id)

        return self.resolve_path(disk, domain)

    def resolve_path(self, disk, domain):
        resolve = self._resolvers[domain.backing_type]
        path = resolve(disk, domain)
        self.log.debug("Resolved disk %s on %s domain %s: %s",
                       disk.id, domain.type, domain.id, path)
        return path

    def _file_path(self, disk, domain):
        if not disk.image_id:
            raise se.InvalidDiskParameter(
                "image_id", disk.image_id,
                "required for disk %s on %s domain" % (disk.id, domain.type))

        descriptor = self._registry.register(domain)
        return os.path.join(descriptor.mount_point, domain.id,
                            sd.IMAGES_DIR, disk.id, disk.image_id)

    def _block_path(self, disk, domain):
        return os.path.join(constants.P_DEV, domain.id,
                            disk.image_id or disk.id)
