# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import errno
import os
import re
import shutil

from vmstorage.common import errors

_SUDO_NON_INTERACTIVE_FLAG = "-n"


class CommandPath(object):
    def __init__(self, name, *args, **kwargs):
        self.name = name
        self.paths = args
        self._cmd = None
        self._search_path = kwargs.get('search_path', True)

    @property
    def cmd(self):
        if not self._cmd:
            for path in self.paths:
                if os.path.exists(path):
                    self._cmd = path
                    break
            else:
                if self._search_path:
                    self._cmd = shutil.which(self.name)
                if self._cmd is None:
                    raise OSError(errno.ENOENT,
                                  os.strerror(errno.ENOENT) + ': ' +
                                  self.name)
        return self._cmd

    def __repr__(self):
        return str(self.cmd)

    def __str__(self):
        return str(self.cmd)


_SUDO = CommandPath("sudo", "/usr/bin/sudo", "/bin/sudo")


def command_log_line(args, cwd=None):
    return "{0} (cwd {1})".format(_list2cmdline(args), cwd)


def retcode_log_line(code, err=None):
    result = "SUCCESS" if code == 0 else "FAILED"
    return "{0}: <err> = {1!r}; <rc> = {2!r}".format(result, err, code)


def _list2cmdline(args):
    """
    Convert argument list to string for logging. The purpose of this log is
    make it easy to run the commands in the shell for debugging.
    """
    parts = []
    for arg in args:
        arg = str(arg)
        if _needs_quoting(arg) or arg == '':
            arg = "'" + arg.replace("'", r"'\''") + "'"
        parts.append(arg)
    return ' '.join(parts)


# This function returns truthy value if its argument contains unsafe characters
# for including in a command passed to the shell.
_needs_quoting = re.compile(r'[^A-Za-z0-9_%+,\-./:=@]').search


class Error(errors.Base):
    msg = ("Command {self.cmd} failed with rc={self.rc} out={self.out!r} "
           "err={self.err!r}")

    def __init__(self, cmd, rc, out, err):
        self.cmd = cmd
        self.rc = rc
        self.out = out
        self.err = err


class TimeoutExpired(errors.Base):
    msg = "Timeout waiting for process pid={self.pid} (timeout={self.timeout})"

    def __init__(self, pid, timeout=None):
        self.pid = pid
        self.timeout = timeout


def sudo(cmd):
    if os.geteuid() == 0:
        return cmd
    command = [str(_SUDO), _SUDO_NON_INTERACTIVE_FLAG]
    command.extend(cmd)
    return command
