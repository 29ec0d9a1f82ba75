# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
errors - vmstorage internal errors

This module provide internal errors which are not part of the public api,
helpers for error handling. For public errors see vmstorage.common.exception
and vmstorage.storage.exception.
"""


class Base(Exception):
    msg = "Base class for vmstorage errors"

    def __str__(self):
        return self.msg.format(self=self)
