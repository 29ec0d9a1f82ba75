# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
A module containing miscellaneous functions and classes that are used
all around the package.
"""

from collections import OrderedDict
from contextlib import contextmanager
import logging
import time


@contextmanager
def stopwatch(message, level=logging.DEBUG,
              log=logging.getLogger('vmstorage.stopwatch')):
    if log.isEnabledFor(level):
        start = time.monotonic()
        yield
        elapsed = time.monotonic() - start
        log.log(level, "%s: %.2f seconds", message, elapsed)
    else:
        yield


def unique(iterable):
    """
    Return unique items from iterable of hashable objects, keeping the
    original order.
    """
    return list(OrderedDict.fromkeys(iterable).keys())
