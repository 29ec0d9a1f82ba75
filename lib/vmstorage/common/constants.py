# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

from vmstorage.common.cmdutils import CommandPath

# Paths

P_VMSTORAGE_CONF = '/etc/vmstorage/vmstorage.conf'
P_MOUNT_ROOT_BASE = '/mnt'
P_DEV = '/dev'

# Users

# The oVirt storage user owning exported images.
NFS_UID = 36

# External programs

EXT_MOUNT = CommandPath("mount",
                        "/usr/bin/mount",
                        "/bin/mount")

EXT_UMOUNT = CommandPath("umount",
                         "/usr/bin/umount",
                         "/bin/umount")
