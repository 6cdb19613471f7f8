# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :
'''Read and write file metadata through the exiftool command-line application.

    >>> from miniexif import MetadataFile
    >>> photo = MetadataFile('photo.jpg')
    >>> photo['DateTimeOriginal']
    >>> photo['artist'] = 'Jane Doe'
    >>> photo.save()
'''

__version__ = '2.1.0'

from .convert import TimestampType
from .errors import *
from .exiftool import Exiftool, exiftool
from .metadata import MetadataFile
from .utils import TagDict, unify

# vim: ft=python ts=8 sw=4 sts=4 ai et
