# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import logging
import os

from collections import OrderedDict
from collections import namedtuple

from vmstorage.common import address
from vmstorage.storage import exception as se
from vmstorage.storage import fileUtils

MountDescriptor = namedtuple("MountDescriptor",
                             "sd_id, uri, spec, mount_point, read_only, type")


def remote_spec(domain):
    """
    Return the normalized "address:path" mount source of a network domain.
    """
    # Note: must be normalized before we escape "/" in mount_dir.
    return address.hosttail_join(domain.address,
                                 fileUtils.normpath(domain.path))


def domain_uri(domain):
    return "%s://%s" % (domain.type, remote_spec(domain))


def mount_dir(spec):
    """
    Return the directory name used to mount the remote spec
    ("address:path").

    Underscores are doubled before slashes are replaced by underscores, so
    the same spec always maps to the same directory.
    """
    return fileUtils.transformPath(spec)


class MountRegistry(object):
    """
    Mounts needed by a session, keyed by storage domain id.

    Registering a domain is idempotent; descriptors are kept in registration
    order so mounting and unmounting happen in a predictable order.
    """

    log = logging.getLogger("storage.MountRegistry")

    def __init__(self, mount_root):
        self._mount_root = mount_root
        self._mounts = OrderedDict()

    @property
    def mount_root(self):
        return self._mount_root

    def register(self, domain):
        descriptor = self._mounts.get(domain.id)
        if descriptor is not None:
            return descriptor

        if not domain.address or not domain.path:
            raise se.InvalidParameterException(
                "storage_domain", domain.id, "missing address or path")

        spec = remote_spec(domain)
        descriptor = MountDescriptor(
            sd_id=domain.id,
            uri=domain_uri(domain),
            spec=spec,
            mount_point=os.path.join(self._mount_root, mount_dir(spec)),
            read_only=True,
            type=domain.type)

        self.log.debug("Registered mount %s", descriptor)
        self._mounts[domain.id] = descriptor
        return descriptor

    def get(self, sd_id):
        return self._mounts.get(sd_id)

    def all(self):
        return list(self._mounts.values())

    def is_empty(self):
        return not self._mounts

    def clear(self):
        self._mounts.clear()

    def __len__(self):
        return len(self._mounts)
