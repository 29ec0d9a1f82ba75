# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import errno
import logging
import os

from vmstorage import utils
from vmstorage.common import cmdutils
from vmstorage.common.config import config
from vmstorage.storage import exception as se
from vmstorage.storage import fileUtils
from vmstorage.storage import mount
from vmstorage.storage import sd

log = logging.getLogger("storage.storageServer")

# Errors raised while running mount or umount.
_COMMAND_ERRORS = (mount.MountError, cmdutils.TimeoutExpired, OSError)


class MountConnection(object):
    """
    Mount a network storage domain described by a MountDescriptor on its
    mount point.

    The connection gets all the information in the ctor. Connection
    properties are not modified after initialization.
    """

    VFS_TYPE = None

    def __init__(self, descriptor, mountClass=mount.Mount):
        self._descriptor = descriptor
        self._mount = mountClass(descriptor.spec, descriptor.mount_point)

    @property
    def id(self):
        return self._descriptor.sd_id

    @property
    def remotePath(self):
        return self._descriptor.spec

    @property
    def localPath(self):
        return self._descriptor.mount_point

    @property
    def options(self):
        opts = []
        if self._descriptor.read_only:
            opts.append("ro")
        opts.extend(self._options())
        return ",".join(utils.unique(opts))

    def _options(self):
        """
        This method may be overriden by derived classes to add mount options.
        """
        return []

    def connect(self):
        """
        Connect if not connected. If connected just return successfully.

        Raises se.MountError if the mount command failed or timed out.
        """
        if self._mount.isMounted():
            log.debug("%s already mounted on %s",
                      self.remotePath, self.localPath)
            return

        try:
            fileUtils.createdir(self.localPath)
            self._mount.mount(self.options, self.VFS_TYPE)
        except _COMMAND_ERRORS as e:
            try:
                os.rmdir(self.localPath)
            except OSError as rmdir_error:
                log.warning(
                    "Error removing mountpoint directory %r: %s",
                    self.localPath, rmdir_error)
            raise se.MountError(
                str(e), uri=self._descriptor.uri,
                mount_point=self.localPath) from e

    @classmethod
    def disconnect(cls, mount_point):
        """
        Disconnect the mount on mount_point if connected and remove the
        mount point directory. If already disconnected, only the directory is
        removed.

        Raises se.UnmountError if the umount command failed or timed out.
        """
        try:
            mnt = mount.getMountFromTarget(mount_point)
        except OSError as e:
            if e.errno != errno.ENOENT:
                raise se.UnmountError(str(e), mount_point=mount_point) from e
            log.debug("%s is not mounted", mount_point)
        else:
            try:
                mnt.umount(force=True, lazy=True)
            except _COMMAND_ERRORS as e:
                raise se.UnmountError(str(e), mount_point=mount_point) from e

        try:
            os.rmdir(mount_point)
        except OSError as e:
            if e.errno != errno.ENOENT:
                raise se.UnmountError(str(e), mount_point=mount_point) from e

    def __repr__(self):
        return "<{0} id={1!r} spec={2!r} mountpoint={3!r}>".format(
            self.__class__.__name__,
            self.id,
            self.remotePath,
            self.localPath)


class NFSConnection(MountConnection):

    VFS_TYPE = "nfs"
    DEFAULT_OPTIONS = ["soft", "nosharecache"]

    def __init__(self, descriptor, mountClass=mount.Mount,
                 timeout=None, retrans=None, extraOptions=None):
        """
        According to nfs(5), NFS will retry a request after 100 deciseconds (10
        seconds). After each retransmission, the timeout is increased by timeo
        value (up to maximum of 600 seconds). After retrans retires, the NFS
        client will fail with "server not responding" message.

        With the default configuration we expect failures in 60 seconds.
        """
        super().__init__(descriptor, mountClass=mountClass)
        if timeout is None:
            timeout = config.getint("storage", "nfs_timeo")
        if retrans is None:
            retrans = config.getint("storage", "nfs_retrans")
        if extraOptions is None:
            extraOptions = config.get("storage", "nfs_options")
        self._timeout = timeout
        self._retrans = retrans
        self._extraOptions = [opt for opt in extraOptions.split(",") if opt]

    def _options(self):
        options = self.DEFAULT_OPTIONS[:]
        options.append("timeo=%d" % self._timeout)
        options.append("retrans=%d" % self._retrans)

        extra = self._extraOptions[:]

        # Disable NFSv3 remote locks, the images are only read, and remote
        # locks may block when the server lost a client. Users can override
        # this by specifying the 'lock' option.
        if "lock" in extra:
            log.warning("Using remote locks for NFSv3 locks")
        elif "nolock" not in extra:
            extra.append("nolock")

        return options + extra


class GlusterFSConnection(MountConnection):

    VFS_TYPE = "glusterfs"

    def __init__(self, descriptor, mountClass=mount.Mount,
                 extraOptions=None):
        super().__init__(descriptor, mountClass=mountClass)
        if extraOptions is None:
            extraOptions = config.get("storage", "glusterfs_options")
        self._extraOptions = [opt for opt in extraOptions.split(",") if opt]

    def _options(self):
        if any(opt.startswith("backup-volfile-servers")
               for opt in self._extraOptions):
            log.info("Using user specified backup-volfile-servers option "
                     "for %s", self.remotePath)
        return self._extraOptions[:]


CONNECTION_TYPES = {
    sd.NFS_DOMAIN: NFSConnection,
    sd.GLUSTERFS_DOMAIN: GlusterFSConnection,
}


def connection_class(sd_type):
    """
    Return the connection class mounting domains of type sd_type.
    """
    try:
        return CONNECTION_TYPES[sd_type]
    except KeyError:
        raise se.MountError("Unsupported storage type", type=sd_type)
