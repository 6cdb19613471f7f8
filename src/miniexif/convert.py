# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
        'TimestampType',
        'convert_after_load',
        'convert_before_save',
        'format_timestamp',
        )

from fractions import Fraction
import datetime
import enum
import re
import logging
log = logging.getLogger(__name__)

from .errors import ConfigurationError

EXIFTOOL_DATE_FORMAT = '%Y:%m:%d %H:%M:%S'


class TimestampType(enum.Enum):
    local = 'local'  # timezone-aware, local timezone unless the value has an offset
    naive = 'naive'  # wall clock as written, no timezone

    @classmethod
    def lookup(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ConfigurationError('Value %r not allowed for option timestamps.' % (value,))


_re_date = re.compile(r'^\d{4}:\d\d:\d\d \d\d:\d\d:\d\d')

_re_timestamp = re.compile(r'''
    ^(?P<year>\d+)-(?P<month>\d+)-(?P<day>\d+)
    \ (?P<hour>\d+):(?P<minute>\d+):(?P<second>\d+)
    (?:\.(?P<fraction>\d+))?
    \s*(?P<tz>Z|[+-]\d\d:?\d\d)?
    ''', re.VERBOSE)


def _parse_tz(s):
    if s == 'Z':
        return datetime.timezone.utc
    sign = -1 if s[0] == '-' else 1
    s = s[1:].replace(':', '')
    return datetime.timezone(sign * datetime.timedelta(hours=int(s[:2]), minutes=int(s[2:])))


def parse_timestamp(s, timestamps=TimestampType.local):
    m = _re_timestamp.match(s)
    if not m:
        raise ValueError('Invalid timestamp: %r' % (s,))
    fraction = m.group('fraction') or '0'
    value = datetime.datetime(
        year=int(m.group('year')),
        month=int(m.group('month')),
        day=int(m.group('day')),
        hour=int(m.group('hour')),
        minute=int(m.group('minute')),
        second=int(m.group('second')),
        microsecond=int(fraction[:6].ljust(6, '0')))
    if timestamps is TimestampType.naive:
        return value
    if m.group('tz'):
        return value.replace(tzinfo=_parse_tz(m.group('tz')))
    return value.astimezone()


def convert_after_load(value, timestamps=TimestampType.local):
    if not isinstance(value, str):
        return value
    if _re_date.match(value):
        timestamps = TimestampType.lookup(timestamps)
        s = re.sub(r'^(\d+):(\d+):', r'\1-\2-', value)
        try:
            value = parse_timestamp(s, timestamps)
        except (ValueError, OverflowError):
            log.debug('Invalid date %r', value)
            value = False
    elif re.match(r'^\+\d+\.\d+$', value):
        value = float(value)
    elif re.match(r'^0+[1-9]+$', value):
        pass  # str
    elif re.match(r'^-?\d+$', value):
        value = int(value)
    elif re.match(r'^(\d+)/(\d+)$', value):
        numerator, denominator = value.split('/')
        if int(denominator):
            value = Fraction(int(numerator), int(denominator))
    elif re.match(r'^[\d ]+$', value):
        pass  # str
    return value


def format_timestamp(value):
    '''Exiftool text of a datetime, keeping its UTC offset if any.'''
    s = value.strftime(EXIFTOOL_DATE_FORMAT)
    if value.microsecond:
        s += ('.%06d' % (value.microsecond,)).rstrip('0')
    offset = value.utcoffset()
    if offset is not None:
        minutes = int(offset.total_seconds()) // 60
        sign = '-' if minutes < 0 else '+'
        s += '%s%02d:%02d' % (sign, abs(minutes) // 60, abs(minutes) % 60)
    return s


def convert_before_save(value):
    if isinstance(value, datetime.datetime):
        return value.strftime(EXIFTOOL_DATE_FORMAT)
    if value is None:
        return ''
    return str(value)

# vim: ft=python ts=8 sw=4 sts=4 ai et
