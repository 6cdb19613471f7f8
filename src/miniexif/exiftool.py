# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = [
        'Exiftool',
        'exiftool',
        ]

import os
import types
import logging
log = logging.getLogger(__name__)

from .convert import TimestampType
from .errors import ToolNotFound
from .exec import Executable
from .file import TempFile
from .tagcache import TagCache, parse_tag_list
from .utils import byte_decode


class Exiftool(Executable):
    '''The exiftool command-line application and its process-wide settings.

    Records use the module-level `exiftool` instance unless given another
    one; the tag registry is populated lazily on first use and never
    afterwards.
    '''

    _name = None

    @property
    def name(self):
        name = self._name
        if not name:
            name = os.environ.get('EXIFTOOL', None)
        if not name:
            name = 'exiftool'
        return name

    @name.setter
    def name(self, value):
        self._name = value

    command = name

    def __init__(self, name=None, *, default_options=None, quoting=None, cache_dir=None):
        if name is not None:
            self.name = name
        if quoting is not None:
            self.quoting = quoting
        self.default_options = {
            'numerical': False,
            'composite': True,
            'ignore_minor_errors': False,
            'replace_invalid_chars': False,
            'timestamps': TimestampType.local,
            'coord_format': None,
        }
        if default_options:
            self.default_options.update(default_options)
        self.tags = TagCache(self, cache_dir=cache_dir)
        self._error_file = None
        super().__init__()

    @property
    def error_file(self):
        '''Shared stderr capture file, created on first use.'''
        if self._error_file is None:
            self._error_file = TempFile.mkstemp(prefix='miniexif-errors-')
        return self._error_file

    def version(self):
        try:
            out, exitstatus = self.spawn_query(ver=True)
        except OSError as err:
            raise ToolNotFound(self.name, err.strerror) from err
        if exitstatus != 0:
            raise ToolNotFound(self.name)
        return out.strip()

    def determine_tags(self, arg):
        try:
            out, exitstatus = self.spawn_query(**{arg: True})
        except OSError as err:
            raise ToolNotFound(self.name, err.strerror) from err
        if exitstatus != 0:
            log.warning('%s -%s: exit status %d', self.name, arg, exitstatus)
        return parse_tag_list(out)

    def read_cmdline(self, file_name, *, numerical=False, composite=True, coord_format=None):
        return self.build_cmdline(
            self.quote(file_name),
            j=True,
            n=numerical,
            e=not composite,
            c=self.quote(coord_format) if coord_format else None,
        )

    def write_cmdline(self, file_name, directives, *, numerical=False, ignore_minor_errors=False):
        '''directives: iterable of (tag, text value) pairs.'''
        args = [self.quote('-%s=%s' % (tag, value))
                for tag, value in directives]
        args.append(self.quote(file_name))
        return self.build_cmdline(
            *args,
            q=True,
            P=True,
            overwrite_original=True,
            n=numerical,
            m=ignore_minor_errors,
        )

    def run(self, cmdline):
        d = types.SimpleNamespace()
        d.cmdline = cmdline
        error_file = self.error_file
        with open(error_file, 'wb') as fp:
            comp = self.run_cmdline(cmdline, stderr=fp)
        d.returncode = comp.returncode
        d.out = comp.stdout
        d.ok = comp.returncode == 0
        if d.ok:
            d.error_text = ''
        else:
            with open(error_file, 'rb') as fp:
                d.error_text = byte_decode(fp.read())
            log.debug('%s: exit status %d: %s', self.name, d.returncode, d.error_text.strip())
        return d

    __call__ = run

exiftool = Exiftool()

# vim: ft=python ts=8 sw=4 sts=4 ai et
