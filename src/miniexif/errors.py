# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
        'ExiftoolError',
        'NotFound',
        'IsDirectory',
        'ExternalToolError',
        'SaveError',
        'ConfigurationError',
        'ToolNotFound',
        )

import errno


class ExiftoolError(Exception):
    pass


class NotFound(ExiftoolError, FileNotFoundError):

    def __init__(self, file_name):
        super().__init__(errno.ENOENT, 'File does not exist', str(file_name))


class IsDirectory(ExiftoolError, IsADirectoryError):

    def __init__(self, file_name):
        super().__init__(errno.EISDIR, 'Is a directory', str(file_name))


class ExternalToolError(ExiftoolError):

    def __init__(self, error_text, *, cmdline=None, returncode=None):
        self.error_text = error_text
        self.cmdline = cmdline
        self.returncode = returncode
        super().__init__(error_text)


class SaveError(ExiftoolError):

    def __init__(self, errors):
        self.errors = dict(errors)
        msgs = ['(%s) %s' % (tag, msg) for tag, msg in self.errors.items()]
        super().__init__("Couldn't save. The following errors occurred: %s" % (
            ', '.join(msgs) if msgs else 'None',))


class ConfigurationError(ExiftoolError, ValueError):
    pass


class ToolNotFound(ExiftoolError, OSError):

    def __init__(self, command, strerror='Command not found'):
        super().__init__(errno.ENOENT, strerror, str(command))

# vim: ft=python ts=8 sw=4 sts=4 ai et
