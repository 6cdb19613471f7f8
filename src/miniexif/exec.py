__all__ = [
        'PosixQuoting',
        'WindowsQuoting',
        'default_quoting',
        'dbg_shell_cmd',
        'dbg_spawn_query',
        'clean_cmd_output',
        'Executable',
        ]

import abc
import errno
import logging
import os
import pexpect
import re
import shutil
import subprocess
import sys
log = logging.getLogger(__name__)

from miniexif.app import app  # Also setup log.verbose
from miniexif.utils import byte_decode

_mswindows = (sys.platform == "win32")


class ShellQuoting(metaclass=abc.ABCMeta):
    '''Double-quote an argument for the platform shell.'''

    @property
    @abc.abstractmethod
    def special_chars(self):
        raise NotImplementedError

    def quote(self, arg):
        arg = os.fspath(arg) if isinstance(arg, os.PathLike) else str(arg)
        return '"' + re.sub('([%s])' % (re.escape(self.special_chars),), r'\\\1', arg) + '"'

    __call__ = quote

    def __repr__(self):
        return '%s()' % (self.__class__.__name__,)


class PosixQuoting(ShellQuoting):

    # Backtick too: sh performs command substitution inside double quotes
    special_chars = '\\"$`'


class WindowsQuoting(ShellQuoting):

    special_chars = '\\"'


default_quoting = WindowsQuoting() if _mswindows else PosixQuoting()


def dbg_shell_cmd(cmdline, *, stdout=None, stderr=None, log_append='', **kwargs):
    if log.isEnabledFor(logging.DEBUG):
        log.verbose('CMD: %s%s',
                    cmdline,
                    log_append)
    if stdout is None:
        stdout = subprocess.PIPE
    return subprocess.run(cmdline, shell=True,
                          stdout=stdout, stderr=stderr,
                          check=False, **kwargs)


def dbg_spawn_query(cmdline, *, log_append=''):
    '''Run cmdline under a pty; return (merged output, exit status).'''
    if log.isEnabledFor(logging.DEBUG):
        log.verbose('CMD: %s%s',
                    cmdline,
                    log_append)
    out, exitstatus = pexpect.run(cmdline, timeout=None, withexitstatus=True)
    return clean_cmd_output(out), exitstatus


def clean_cmd_output(out):
    out = byte_decode(out)
    out = re.sub(r'\x1B\[[0-9;]*m', '', out)
    out = re.sub(r'\r\n', '\n', out)
    out = re.sub(r'.*\r', '', out, flags=re.MULTILINE)
    out = re.sub(r'\t', ' ', out)
    out = re.sub(r' +$', '', out, flags=re.MULTILINE)
    return out


class Executable(metaclass=abc.ABCMeta):

    quoting = default_quoting

    @property
    @abc.abstractmethod
    def name(self):
        raise NotImplementedError

    def which(self, mode=os.F_OK | os.X_OK, path=None, assert_found=True):
        cmd = shutil.which(os.fspath(self.name), mode=mode, path=path)
        if cmd is None and assert_found:
            raise OSError(errno.ENOENT, 'Command not found', self.name)
        return cmd

    def quote(self, arg):
        return self.quoting.quote(arg)

    @classmethod
    def kwargs_to_cmdargs(cls, **kwargs):
        cmdargs = []
        for k, v in kwargs.items():
            if v in (None, False):
                # Dropped for ease of passing unused arguments
                continue
            cmdargs.append('-' + k)
            if v is not True:
                cmdargs.append(v)
        return cmdargs

    def build_cmdline(self, *args, **kwargs):
        '''Command line text: name, then option flags, then args.

        args are inserted as-is; quote them first where needed.
        '''
        cmd = [self.name] \
            + self.kwargs_to_cmdargs(**kwargs) \
            + [str(arg) for arg in args]
        return ' '.join(cmd)

    def run_cmdline(self, cmdline, **kwargs):
        return dbg_shell_cmd(cmdline, **kwargs)

    def spawn_query(self, *args, **kwargs):
        cmdline = self.build_cmdline(*args, **kwargs)
        try:
            return dbg_spawn_query(cmdline)
        except pexpect.ExceptionPexpect as err:
            raise OSError(errno.ENOENT, str(err), self.name) from err

# vim: ft=python ts=8 sw=4 sts=4 ai et
