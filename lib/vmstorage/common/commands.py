# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

from contextlib import contextmanager
import logging
import subprocess

from vmstorage.common import cmdutils


log = logging.getLogger("common.commands")


def run(args, input=None, cwd=None, env=None, sudo=False, timeout=None):
    """
    Starts a command communicate with it, and wait until the command
    terminates. Ensures that the command is killed if an unexpected error is
    raised, or if the command does not terminate within timeout.

    Arguments:
        args (list): Command arguments
        input (bytes): Data to send to the command via stdin.
        cwd (str): working directory for the child process
        env (dict): environment of the new child process
        sudo (bool): if set to True, run the command via sudo
        timeout (float): seconds to wait for the command. None waits
            forever.

    Returns:
        The command output (bytes)

    Raises:
        OSError if the command could not start.
        cmdutils.Error if the command terminated with a non-zero exit code.
        cmdutils.TimeoutExpired if the command did not terminate in time.
        TerminatingFailure if command could not be terminated.
    """
    p = start(args,
              stdin=subprocess.PIPE if input else None,
              stdout=subprocess.PIPE,
              stderr=subprocess.PIPE,
              cwd=cwd,
              env=env,
              sudo=sudo)

    with terminating(p):
        try:
            out, err = p.communicate(input, timeout=timeout)
        except subprocess.TimeoutExpired:
            log.warning("Command %s timed out after %s seconds",
                        args, timeout)
            raise cmdutils.TimeoutExpired(p.pid, timeout)

    log.debug(cmdutils.retcode_log_line(p.returncode, err))

    if p.returncode != 0:
        raise cmdutils.Error(args, p.returncode, out, err)

    return out


def start(args, stdin=None, stdout=None, stderr=None, cwd=None, env=None,
          sudo=False):
    """
    Starts a command and return it. The caller is responsible for communicating
    with the command, waiting for it, and if needed, terminating it.
    """
    if sudo:
        args = cmdutils.sudo(args)

    command = [str(arg) for arg in args]
    log.debug(cmdutils.command_log_line(command, cwd=cwd))

    return subprocess.Popen(
        command,
        close_fds=True,
        cwd=cwd,
        env=env,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr)


class TerminatingFailure(Exception):

    msg = "Failed to terminate process {self.pid}: {self.error}"

    def __init__(self, pid, error):
        self.pid = pid
        self.error = error

    def __str__(self):
        return self.msg.format(self=self)


def terminate(proc):
    try:
        if proc.poll() is None:
            log.debug('Terminating process pid=%d', proc.pid)
            proc.kill()
            proc.wait()
    except Exception as e:
        raise TerminatingFailure(proc.pid, e)


@contextmanager
def terminating(proc):
    try:
        yield proc
    finally:
        terminate(proc)
