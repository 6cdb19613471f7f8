__all__ = [
        'app',
        ]

import logging

HAVE_COLOREDLOGS = False
try:
    import coloredlogs
    HAVE_COLOREDLOGS = True
except ImportError:
    pass

DEFAULT_ROOT_LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'

if HAVE_COLOREDLOGS:
    DEFAULT_LEVEL_STYLES = dict(coloredlogs.DEFAULT_LEVEL_STYLES)
    DEFAULT_LEVEL_STYLES.update(
            debug=dict(color='magenta', bold=getattr(coloredlogs, 'CAN_USE_BOLD_FONT', True)),
            verbose=dict(color='blue'),
            )

def addLoggingLevelName(level, levelName):
    logging.addLevelName(level, levelName)
    setattr(logging, levelName, level)

    lowerName = levelName.lower()

    def Logger_func(self, msg, *args, **kwargs):
        self.log(level, msg, *args, **kwargs)
    setattr(logging.Logger, lowerName, Logger_func)

    def LoggerAdapter_func(self, msg, *args, **kwargs):
        self.log(level, msg, *args, **kwargs)
    setattr(logging.LoggerAdapter, lowerName, LoggerAdapter_func)

    def root_func(msg, *args, **kwargs):
        logging.log(level, msg, *args, **kwargs)
    setattr(logging, lowerName, root_func)

if not hasattr(logging, 'VERBOSE'):
    addLoggingLevelName((logging.INFO + logging.DEBUG) // 2, "VERBOSE")


class App(object):
    '''Logging setup for programs built on miniexif.

    The library never configures logging by itself; call init_logging from
    a program's entry point.
    '''

    log = logging.getLogger('miniexif')

    def init_logging(self, level=None, **kwargs):
        if HAVE_COLOREDLOGS:
            coloredlogs.install(
                    level=level if level is not None else logging.INFO,
                    fmt=DEFAULT_ROOT_LOG_FORMAT,
                    level_styles=DEFAULT_LEVEL_STYLES,
                    **kwargs)
        else:
            logging.basicConfig(
                    level=level if level is not None else logging.INFO,
                    format=DEFAULT_ROOT_LOG_FORMAT,
                    **kwargs)

    def set_logging_level(self, level):
        logging.getLogger().setLevel(level)
        if HAVE_COLOREDLOGS:
            coloredlogs.set_level(level)

app = App()

# vim: ft=python ts=8 sw=4 sts=4 ai et
