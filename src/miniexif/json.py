# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
        'load',
        'loads',
        'dump',
        'dumps',
        'JSONEncoder',
        )

from fractions import Fraction
import datetime

from json import JSONEncoder as _JSONEncoder
from json import load as _load
from json import loads as _loads
from json import dump as _dump
from json import dumps as _dumps

from .convert import format_timestamp


def load(fp, **kwargs):
    return _load(fp, **kwargs)

def loads(s, **kwargs):
    return _loads(s, **kwargs)

def dump(obj, fp, cls=None, **kwargs):
    if cls is None:
        cls = JSONEncoder
    return _dump(obj, fp, cls=cls, **kwargs)

def dumps(obj, cls=None, **kwargs):
    if cls is None:
        cls = JSONEncoder
    return _dumps(obj, cls=cls, **kwargs)


class JSONEncoder(_JSONEncoder):
    '''Encodes typed tag values back to the text exiftool would print.'''

    _builtin_encoders = {}

    def _encode_datetime(obj):
        return format_timestamp(obj)

    _builtin_encoders[datetime.datetime] = _encode_datetime

    def _encode_date(obj):
        return obj.strftime('%Y:%m:%d')

    _builtin_encoders[datetime.date] = _encode_date

    def _encode_fraction(obj):
        return '%d/%d' % (obj.numerator, obj.denominator)

    _builtin_encoders[Fraction] = _encode_fraction

    def default(self, obj):
        for cls in type(obj).__mro__:
            f = self._builtin_encoders.get(cls, None)
            if f is not None:
                return f(obj)
        return super().default(obj)

# vim: ft=python ts=8 sw=4 sts=4 ai et
