# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

__all__ = (
        'XdgResource',
        )

from pathlib import Path
import abc
import xdg.BaseDirectory

class XdgResource(metaclass=abc.ABCMeta):

    @property
    @abc.abstractmethod
    def xdg_resource(self):
        raise NotImplementedError

    def save_cache_path(self):
        '''$XDG_CACHE_HOME/<resource> (~/.cache/<resource>), created if needed.'''
        return Path(xdg.BaseDirectory.save_cache_path(self.xdg_resource))

# vim: ft=python ts=8 sw=4 sts=4 ai et
