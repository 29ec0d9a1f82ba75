# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

# for a "singleton" config object
import configparser
import os

from vmstorage.common import constants

parameters = [
    # Section: [storage]
    ('storage', [

        # Base directory for per-VM mount roots. Mounts for a VM are placed
        # under <mount_root_base>/<vm_id>.
        ('mount_root_base', constants.P_MOUNT_ROOT_BASE, None),

        # Effective uid used while opening disks on network storage. The
        # exported images are owned by the vdsm user (36:36).
        ('nfs_uid', str(constants.NFS_UID), None),

        # Seconds to wait for a mount command before killing it.
        ('mount_timeout', '60', None),

        # Seconds to wait for an umount command before killing it.
        ('umount_timeout', '60', None),

        # NFS timeo mount option, in deciseconds. See nfs(5).
        ('nfs_timeo', '100', None),

        # NFS retrans mount option. See nfs(5).
        ('nfs_retrans', '3', None),

        # Extra comma separated mount options for NFS domains.
        ('nfs_options', '', None),

        # Extra comma separated mount options for GlusterFS domains.
        ('glusterfs_options', '', None),
    ]),

    # Section: [logging]
    ('logging', [

        ('level', 'INFO', None),

        ('format',
         '%(asctime)s %(levelname)-5s (%(threadName)s) [%(name)s] '
         '%(message)s (%(module)s:%(lineno)d)', None),

        # Render timestamps in the local timezone instead of UTC.
        ('use_local_timezone', 'true', None),
    ]),
]


def set_defaults(config):
    for section, keylist in parameters:
        config.add_section(section)
        for key, value, comment in keylist:
            config.set(section, key, value)


def conf_path():
    return os.environ.get('VMSTORAGE_CONF', constants.P_VMSTORAGE_CONF)


def load(path=None):
    # Interpolation would break the logging format string.
    cfg = configparser.ConfigParser(interpolation=None)
    set_defaults(cfg)
    cfg.read([path or conf_path()])
    return cfg


config = load()
