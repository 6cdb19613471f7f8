# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = [
        'toPath',
        'File',
        'TempFile',
        ]

from contextlib import contextmanager
from pathlib import Path
import os
import shutil
import tempfile

import logging
log = logging.getLogger(__name__)

_osPath = type(Path(''))


def toPath(value):
    if type(value) is _osPath:
        return value
    if isinstance(value, File):
        return value.file_name
    return Path(value)


class File(object):

    _file_name = None

    @property
    def file_name(self):
        return self._file_name

    @file_name.setter
    def file_name(self, value):
        self._file_name = None if value is None else toPath(value)

    def __init__(self, file_name=None):
        self.file_name = file_name
        super().__init__()

    def __fspath__(self):
        if self.file_name is None:
            raise ValueError('%r: file_name not defined' % (self,))
        return os.fspath(self.file_name)

    def __str__(self):
        if self.file_name is None:
            return '(unnamed)'
        else:
            return os.fspath(self)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, str(self))

    def assert_file_name_defined(self):
        if not self.file_name:
            raise ValueError('%r: file_name not defined' % (self,))

    def unlink(self, force=False):
        self.assert_file_name_defined()
        try:
            self.file_name.unlink()
        except FileNotFoundError:
            if not force:
                raise

    def copy_to(self, dst):
        '''Copy content only; dst keeps its own permissions if it exists.'''
        self.assert_file_name_defined()
        shutil.copyfile(self.file_name, toPath(dst))

    def replace(self, target, update_file_name=True):
        # Note: replace could fail if files are on different filesystems.
        target = toPath(target)
        self.assert_file_name_defined()
        self.file_name.replace(target)
        if update_file_name:
            self.file_name = target

    @contextmanager
    def replace_atomically(self):
        '''Yield a sibling TempFile; on success, it replaces this file.

        The original's permission bits are carried over.
        '''
        self.assert_file_name_defined()
        with TempFile.mkstemp(dir=self.file_name.parent,
                              prefix='.' + self.file_name.name + '.',
                              suffix='.tmp') as tmp_file:
            yield tmp_file
            shutil.copymode(self.file_name, tmp_file.file_name)
            tmp_file.replace(self.file_name, update_file_name=False)
            tmp_file.delete = False


class TempFile(File):

    delete = True

    def __init__(self, file_name, *args, delete=True, **kwargs):
        self.delete = delete
        super().__init__(file_name, *args, **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        if self.delete:
            self.unlink(force=True)
            self.delete = False

    def __del__(self):
        if self.delete and self.file_name is not None:
            self.unlink(force=True)

    @classmethod
    def mkstemp(cls, **kwargs):
        '''mkstemp(suffix=, prefix=, dir=)'''
        fd, file_name = tempfile.mkstemp(**kwargs)
        os.close(fd)
        return cls(file_name=file_name)

# vim: ft=python ts=8 sw=4 sts=4 ai et
