# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Storage domain and disk records, as reported by the hypervisor.
"""

from collections import namedtuple

# Storage Domain Types
NFS_DOMAIN = "nfs"
GLUSTERFS_DOMAIN = "glusterfs"
OTHER_DOMAIN = "other"

# Domains reached through a file system mount. Any other type is accessed
# as a block device.
NETWORK_DOMAIN_TYPES = (NFS_DOMAIN, GLUSTERFS_DOMAIN)

# Directory holding the images of file based domains.
IMAGES_DIR = "images"


def classify(sd_type):
    """
    Return the backing type of a storage domain type reported by the
    hypervisor: NFS_DOMAIN, GLUSTERFS_DOMAIN or OTHER_DOMAIN.
    """
    if sd_type in NETWORK_DOMAIN_TYPES:
        return sd_type
    return OTHER_DOMAIN


class StorageDomain(namedtuple("StorageDomain", "id, type, address, path")):
    """
    A storage domain. address and path are reported only for network
    domains.
    """

    __slots__ = ()

    def __new__(cls, id, type, address=None, path=None):
        return super().__new__(cls, id, type, address, path)

    @classmethod
    def from_dict(cls, d):
        """
        Create from the hypervisor representation::

            {"id": "...", "storage": {"type": "nfs",
                                      "address": "10.0.0.5",
                                      "path": "/export/a"}}
        """
        storage = d.get("storage") or {}
        return cls(d["id"],
                   storage.get("type"),
                   address=storage.get("address"),
                   path=storage.get("path"))

    @property
    def backing_type(self):
        return classify(self.type)


class Disk(namedtuple("Disk",
                      "id, name, image_id, format, storage_domain_id")):
    """
    A virtual disk attached to a VM. storage_domain_id is None when the disk
    is not assigned to any storage domain.
    """

    __slots__ = ()

    def __new__(cls, id, name=None, image_id=None, format=None,
                storage_domain_id=None):
        return super().__new__(cls, id, name, image_id, format,
                               storage_domain_id)

    @classmethod
    def from_dict(cls, d):
        """
        Create from the hypervisor representation. Only the first storage
        domain of the disk is used::

            {"id": "...", "name": "vm1_Disk1", "image_id": "...",
             "format": "cow", "storage_domains": [{"id": "..."}]}
        """
        domains = d.get("storage_domains") or []
        sd_id = domains[0]["id"] if domains else None
        return cls(d["id"],
                   name=d.get("name"),
                   image_id=d.get("image_id"),
                   format=d.get("format"),
                   storage_domain_id=sd_id)
