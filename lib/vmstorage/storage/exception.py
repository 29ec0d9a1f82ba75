# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

########################################################
#
#  Set of storage exceptions.
#
########################################################

from vmstorage.common.exception import ContextException
from vmstorage.common.exception import GeneralException


#################################################
# Validation Exceptions
#################################################

class InvalidParameterException(GeneralException):
    code = 1000
    message = "Invalid parameter"

    def __init__(self, name, value, reason=None):
        if reason is None:
            self.value = "%s=%s" % (name, value)
        else:
            self.value = "%s=%s (%s)" % (name, value, reason)


class InvalidDiskParameter(InvalidParameterException):
    code = 1001
    message = "Invalid disk parameter"


#################################################
# General Storage Exceptions
#################################################

class StorageException(ContextException):
    code = 200
    message = "General Storage Exception"


#################################################
# Storage Domain Exceptions
#################################################

class DomainLookupError(StorageException, LookupError):
    """
    Storage domain or disk metadata could not be fetched from the
    hypervisor.
    """
    code = 358
    message = "Cannot fetch storage metadata from hypervisor"


class UnassignedStorageDomain(StorageException):
    """
    A disk is not assigned to any known storage domain. Callers skip such
    disks.
    """
    code = 359
    message = "Disk has no assigned storage domain"


#################################################
# Connections Exceptions
#################################################

class MountError(StorageException):
    code = 477
    message = "Problem while trying to mount target"


class UnmountError(MountError):
    code = 478
    message = "Problem while trying to unmount target"
