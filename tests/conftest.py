# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Common fixtures that can be used without importing anything.
"""

import pytest

from vmstorage.common import commands
from vmstorage.common import constants
from vmstorage.storage import mount


@pytest.fixture
def proc_mounts(tmpdir, monkeypatch):
    """
    Replace /proc/mounts with an empty file. Tests add mounts by writing
    fstab lines to the returned path.
    """
    path = tmpdir.join("mounts")
    path.write("")
    monkeypatch.setattr(mount, "_PROC_MOUNTS_PATH", str(path))
    return path


class FakeCommands(object):

    def __init__(self):
        self.calls = []
        self.sudo = []
        self.errors = {}

    def run(self, args, input=None, cwd=None, env=None, sudo=False,
            timeout=None):
        args = [str(a) for a in args]
        self.calls.append((args, timeout))
        self.sudo.append(sudo)
        error = self.errors.get(args[-1])
        if error is not None:
            raise error
        return b""


@pytest.fixture
def fake_commands(monkeypatch):
    """
    Record commands run by vmstorage.storage.mount instead of running them.
    Set fake_commands.errors[last_arg] to fail a command.
    """
    fake = FakeCommands()
    monkeypatch.setattr(commands, "run", fake.run)
    monkeypatch.setattr(constants, "EXT_MOUNT", "mount")
    monkeypatch.setattr(constants, "EXT_UMOUNT", "umount")
    return fake
