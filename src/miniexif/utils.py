# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
    'unify',
    'TagDict',
    'byte_decode',
    'replace_invalid_chars',
)

import collections.abc
import re
import reprlib
import logging
log = logging.getLogger(__name__)


def unify(tag):
    '''Comparison key of a tag name.

    DateTimeOriginal, datetimeoriginal and date_time_original all unify to
    'datetimeoriginal'.
    '''
    return re.sub(r'[-_]', '', str(tag)).lower()


class TagDict(collections.abc.MutableMapping):
    '''Ordered mapping keyed by unified tag names.

    Each entry remembers the spelling it was first set with; iteration
    yields those spellings.
    '''

    def __init__(self, *args, **kwargs):
        self._data = {}
        self._names = {}
        self.update(*args, **kwargs)

    def _sanitize_key(self, key):
        return unify(key)

    def __getitem__(self, key):
        return self._data[self._sanitize_key(key)]

    def __setitem__(self, key, value):
        ukey = self._sanitize_key(key)
        if ukey not in self._data:
            self._names[ukey] = key
        self._data[ukey] = value

    def __delitem__(self, key):
        ukey = self._sanitize_key(key)
        del self._data[ukey]
        del self._names[ukey]

    def __contains__(self, key):
        return self._sanitize_key(key) in self._data

    def __iter__(self):
        for ukey in self._data:
            yield self._names[ukey]

    def __len__(self):
        return len(self._data)

    def clear(self):
        self._data.clear()
        self._names.clear()

    def original_name(self, key):
        return self._names.get(self._sanitize_key(key))

    def unified_keys(self):
        return iter(self._data)

    @reprlib.recursive_repr()
    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, dict(self.items()))


def byte_decode(b, encodings=('utf-8', 'iso-8859-1'), errors='strict'):
    if isinstance(b, str):
        return b
    if isinstance(encodings, str):
        encodings = [encodings]
    last_e = None
    for encoding in encodings:
        try:
            return b.decode(encoding, errors)
        except UnicodeDecodeError as e:
            last_e = e
    raise ValueError('Unable to decode %r' % (b,)) from last_e


def replace_invalid_chars(b, replacement):
    '''Decode UTF-8 bytes, substituting each invalid byte with replacement.'''
    s = b.decode('utf-8', 'surrogateescape')
    return re.sub('[\udc80-\udcff]', lambda m: replacement, s)

# vim: ft=python ts=8 sw=4 sts=4 ai et
