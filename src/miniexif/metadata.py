# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = [
        'MetadataFile',
        ]

import datetime
import numbers
import re
import logging
log = logging.getLogger(__name__)

from . import json
from .convert import TimestampType, convert_after_load, convert_before_save
from .errors import NotFound, IsDirectory, ExternalToolError, SaveError
from .exiftool import exiftool as default_exiftool
from .file import File, TempFile, toPath
from .utils import TagDict, byte_decode, replace_invalid_chars


def _tag_property(tag):

    def fget(self):
        return self.get(tag)

    def fset(self, value):
        self[tag] = value

    return property(fget, fset, doc='The %s tag.' % (tag,))


def _is_numeric(value):
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


class MetadataFile(File):
    '''Tags of one file, read and written through exiftool.

    Reading a tag returns its staged value if any, else the loaded one.
    Assigning a tag only stages it; save() writes all staged tags into a
    temporary copy of the file and replaces the original only when every
    write succeeded.
    '''

    def __init__(self, file_name=None, *, exiftool=None, **options):
        if exiftool is None:
            exiftool = default_exiftool
        self.exiftool = exiftool
        opts = dict(exiftool.default_options)
        unknown = set(options) - set(opts)
        if unknown:
            raise TypeError('Unsupported options: %s' % (', '.join(sorted(unknown)),))
        opts.update(options)
        self.numerical = opts['numerical']
        self.composite = opts['composite']
        self.ignore_minor_errors = opts['ignore_minor_errors']
        self.replace_invalid_chars = opts['replace_invalid_chars']
        self.timestamps = opts['timestamps']
        self.coord_format = opts['coord_format']
        self.values = TagDict()
        self.changed_values = TagDict()
        self.errors = TagDict()
        super().__init__(file_name=None)
        if file_name is not None:
            self.load(file_name)

    @classmethod
    def from_dict(cls, d, **kwargs):
        '''New record from a mapping of tag names to (exiftool text) values.

        Options not given are guessed from the values.
        '''
        self = cls(**kwargs)
        for tag, value in d.items():
            self._set_value(tag, convert_after_load(value, self.timestamps))
        self.set_attributes_by_heuristic()
        return self

    @classmethod
    def from_json(cls, json_text, **kwargs):
        '''New record from the output of `exiftool -j`.'''
        self = cls(**kwargs)
        self.errors.clear()
        self._parse_output(json_text)
        return self

    def load(self, file_name):
        if file_name is None or not toPath(file_name).exists():
            raise NotFound(file_name)
        file_name = toPath(file_name)
        if file_name.is_dir():
            raise IsDirectory(file_name)
        self.exiftool.tags.ensure_loaded()
        self.file_name = file_name
        self.values.clear()
        self.changed_values.clear()
        self.errors.clear()
        d = self.exiftool.run(self.exiftool.read_cmdline(
            self.file_name,
            numerical=self.numerical,
            composite=self.composite,
            coord_format=self.coord_format))
        if not d.ok:
            raise ExternalToolError(d.error_text, cmdline=d.cmdline, returncode=d.returncode)
        self._parse_output(d.out)
        return self

    def reload(self):
        return self.load(self.file_name)

    def _parse_output(self, out):
        if isinstance(out, bytes):
            if self.replace_invalid_chars is not False and self.replace_invalid_chars is not None:
                out = replace_invalid_chars(out, self.replace_invalid_chars)
            else:
                out = byte_decode(out)
        tags_list = json.loads(out)
        if not tags_list:
            raise ExternalToolError('No metadata in exiftool output: %r' % (out,))
        tags_dict = tags_list[0]
        if log.isEnabledFor(logging.DEBUG):
            import pprint
            log.debug('tags_dict:\n%s', pprint.pformat(tags_dict))
        for tag, value in tags_dict.items():
            self._set_value(tag, convert_after_load(value, self.timestamps))

    def _set_value(self, tag, value):
        self.values[tag] = value

    def set_attributes_by_heuristic(self):
        self.composite = 'ImageSize' in self.values
        self.numerical = isinstance(self.values.get('FileSize'), int)
        file_modify_date = self.values.get('FileModifyDate')
        if isinstance(file_modify_date, datetime.datetime) \
                and file_modify_date.tzinfo is None:
            self.timestamps = TimestampType.naive
        else:
            self.timestamps = TimestampType.local

    def __getitem__(self, tag):
        if tag in self.changed_values:
            return self.changed_values[tag]
        return self.values[tag]

    def __setitem__(self, tag, value):
        self.changed_values[tag] = value

    def __contains__(self, tag):
        return tag in self.changed_values or tag in self.values

    def get(self, tag, default=None):
        try:
            return self[tag]
        except KeyError:
            return default

    def set(self, tag, value):
        self[tag] = value

    def changed(self, tag=None):
        if tag is not None:
            return tag in self.changed_values
        return bool(self.changed_values)

    def revert(self, tag=None):
        if tag is not None:
            if tag not in self.changed_values:
                return False
            del self.changed_values[tag]
            return True
        res = bool(self.changed_values)
        self.changed_values.clear()
        return res

    def tags(self):
        return list(self.values.keys())

    def changed_tags(self):
        return [self.original_tag(tag) for tag in self.changed_values.keys()]

    def original_tag(self, tag):
        return self.exiftool.tags.original_tag(tag) or tag

    def _save_tag(self, tag, value, temp_file):
        arr_val = list(value) if isinstance(value, (list, tuple)) else [value]
        numerical = any(_is_numeric(v) for v in arr_val)
        original_tag = self.original_tag(tag)
        directives = [(original_tag, convert_before_save(v)) for v in arr_val]
        return self.exiftool.run(self.exiftool.write_cmdline(
            temp_file,
            directives,
            numerical=numerical,
            ignore_minor_errors=self.ignore_minor_errors))

    @staticmethod
    def _clean_error_text(error_text):
        return re.sub(r'Nothing to do\.\n\Z', '', error_text).rstrip()

    def save(self, check=False):
        '''Write staged tags; return True if all of them were written.

        With check=True, a failure raises SaveError instead.
        '''
        if not self.changed_values:
            if check:
                raise SaveError(self.errors)
            return False
        self.assert_file_name_defined()
        self.exiftool.tags.ensure_loaded()
        self.errors.clear()
        all_ok = True
        with TempFile.mkstemp(prefix='miniexif-', suffix=self.file_name.suffix) as temp_file:
            self.copy_to(temp_file)
            for tag, value in self.changed_values.items():
                d = self._save_tag(tag, value, temp_file)
                if not d.ok:
                    all_ok = False
                    self.errors[tag] = self._clean_error_text(d.error_text)
                    log.warning('%s: %s: %s', self, tag, self.errors[tag])
            if all_ok:
                self._commit(temp_file)
        if all_ok:
            self.reload()
        elif check:
            raise SaveError(self.errors)
        return all_ok

    def _commit(self, temp_file):
        with self.replace_atomically() as tmp_file:
            temp_file.copy_to(tmp_file)

    def clear_all_tags(self):
        '''Remove all writable metadata; staged changes are discarded.'''
        self.assert_file_name_defined()
        self.exiftool.tags.ensure_loaded()
        self.errors.clear()
        with TempFile.mkstemp(prefix='miniexif-', suffix=self.file_name.suffix) as temp_file:
            self.copy_to(temp_file)
            d = self.exiftool.run(self.exiftool.write_cmdline(
                temp_file,
                [('all', '')],
                ignore_minor_errors=self.ignore_minor_errors))
            if d.ok:
                self._commit(temp_file)
        if not d.ok:
            self.errors['all'] = self._clean_error_text(d.error_text)
            log.warning('%s: %s', self, self.errors['all'])
            return False
        self.reload()
        return True

    def to_dict(self):
        return dict(self.values.items())

    def to_json(self, **kwargs):
        kwargs.setdefault('indent', 2)
        kwargs.setdefault('ensure_ascii', False)
        return json.dumps([self.to_dict()], **kwargs)

    file_size = _tag_property('FileSize')
    file_modify_date = _tag_property('FileModifyDate')
    image_size = _tag_property('ImageSize')
    date_time_original = _tag_property('DateTimeOriginal')
    create_date = _tag_property('CreateDate')
    modify_date = _tag_property('ModifyDate')
    orientation = _tag_property('Orientation')
    artist = _tag_property('Artist')
    comment = _tag_property('Comment')

# vim: ft=python ts=8 sw=4 sts=4 ai et
