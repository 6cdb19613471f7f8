# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
        'TagCache',
        )

from pathlib import Path
import os
import re
import logging
log = logging.getLogger(__name__)

from . import json
from .file import TempFile
from .utils import unify
from .xdg import XdgResource


def parse_tag_list(out):
    '''Tag names of `exiftool -list`/`-listw` output.

    Names are on indented lines, whitespace-separated; other lines are
    headings.
    '''
    tags = set()
    for line in out.splitlines():
        if not re.match(r'^\s', line):
            continue
        tags.update(line.split())
    return tags


class TagCache(XdgResource):
    '''Known exiftool tag names, persisted once per exiftool version.

    Populated on first use and read-only afterwards.
    '''

    xdg_resource = 'miniexif'

    cache_dir = None

    _all_tags = None
    _writable_tags = None
    _all_tags_map = None

    def __init__(self, exiftool, *, cache_dir=None):
        self.exiftool = exiftool
        if cache_dir is not None:
            self.cache_dir = Path(cache_dir)
        super().__init__()

    @property
    def loaded(self):
        return self._all_tags_map is not None

    def cache_file_name(self, version):
        cache_dir = self.cache_dir
        if cache_dir is None:
            cache_dir = self.save_cache_path()
        else:
            cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir / 'exiftool_tags_{}.json'.format(version.replace('.', '_'))

    def ensure_loaded(self):
        if self.loaded:
            return
        version = self.exiftool.version()
        cache_file_name = self.cache_file_name(version)
        if not cache_file_name.exists() or cache_file_name.stat().st_size == 0:
            d = self.determine_all()
            self.write_cache_file(cache_file_name, d)
        else:
            log.debug('Reading %s', cache_file_name)
            with cache_file_name.open('r', encoding='utf-8') as fp:
                d = json.load(fp)
        self._all_tags = frozenset(d['all_tags'])
        self._writable_tags = frozenset(d['writable_tags'])
        self._all_tags_map = dict(d['all_tags_map'])

    def determine_all(self):
        log.info('Determining exiftool tag names...')
        all_tags = self.exiftool.determine_tags('list')
        writable_tags = self.exiftool.determine_tags('listw')
        all_tags_map = {unify(tag): tag for tag in sorted(all_tags)}
        return {
            'all_tags': sorted(all_tags),
            'writable_tags': sorted(writable_tags),
            'all_tags_map': all_tags_map,
        }

    def write_cache_file(self, cache_file_name, d):
        log.debug('Writing %s', cache_file_name)
        with TempFile.mkstemp(dir=cache_file_name.parent,
                              prefix=cache_file_name.name + '.',
                              suffix='.tmp') as tmp_file:
            with open(tmp_file, 'w', encoding='utf-8') as fp:
                json.dump(d, fp, indent=2, sort_keys=True)
            tmp_file.replace(cache_file_name, update_file_name=False)
            tmp_file.delete = False

    @property
    def all_tags(self):
        self.ensure_loaded()
        return self._all_tags

    @property
    def writable_tags(self):
        self.ensure_loaded()
        return self._writable_tags

    @property
    def all_tags_map(self):
        self.ensure_loaded()
        return self._all_tags_map

    def original_tag(self, tag):
        return self.all_tags_map.get(unify(tag))

# vim: ft=python ts=8 sw=4 sts=4 ai et
