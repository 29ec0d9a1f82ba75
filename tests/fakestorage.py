# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Fake hypervisor and connections for testing sessions without real storage.
"""

import os

from vmstorage.storage import exception as se
from vmstorage.storage import sd


class FakeHypervisor(object):

    def __init__(self, domains=(), disks=(), error=None):
        self.domains = list(domains)
        self.disks = list(disks)
        self.error = error
        self.domain_calls = 0
        self.disk_calls = []

    def list_storage_domains(self):
        self.domain_calls += 1
        if self.error:
            raise self.error
        return self.domains

    def list_vm_disks(self, vm_id):
        self.disk_calls.append(vm_id)
        if self.error:
            raise self.error
        return self.disks


class FakeConnections(object):
    """
    Replacement for storageServer.connection_class, recording connect and
    disconnect calls. Connecting creates the mount point directory, like the
    real connection.
    """

    def __init__(self, fail_connect=(), fail_disconnect=()):
        self.connected = []
        self.disconnected = []
        self.types = []
        fake = self

        class Connection(object):

            def __init__(self, descriptor):
                self.descriptor = descriptor

            def connect(self):
                if self.descriptor.sd_id in fail_connect:
                    raise se.MountError("Fake mount failure",
                                        uri=self.descriptor.uri)
                os.makedirs(self.descriptor.mount_point)
                fake.connected.append(self.descriptor.sd_id)

            @classmethod
            def disconnect(cls, mount_point):
                fake.disconnected.append(mount_point)
                if mount_point in fail_disconnect:
                    raise se.UnmountError("Fake umount failure",
                                          mount_point=mount_point)
                if os.path.isdir(mount_point):
                    os.rmdir(mount_point)

        self.Connection = Connection

    def __call__(self, sd_type):
        self.types.append(sd_type)
        return self.Connection


def nfs_domain(sd_id, address="10.0.0.5", path=None):
    return sd.StorageDomain(sd_id, sd.NFS_DOMAIN, address=address,
                            path=path or "/export/" + sd_id)


def gluster_domain(sd_id, address="gluster.example.com", path=None):
    return sd.StorageDomain(sd_id, sd.GLUSTERFS_DOMAIN, address=address,
                            path=path or "/" + sd_id)


def block_domain(sd_id, type="iscsi"):
    return sd.StorageDomain(sd_id, type)
