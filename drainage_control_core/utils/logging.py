import functools
import logging
import sys
import typing as t
import warnings

from drainage_control_core.settings import Settings


def get_logger(settings: Settings, name=None, capture_warnings=True):
    logger = logging.getLogger(name or settings.name)
    logger.setLevel(logging.getLevelName(settings.log_level.upper()))
    if not any(getattr(h, "_drainage_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(settings.log_format, style="{"))
        handler._drainage_handler = True
        logger.addHandler(handler)
    if capture_warnings:
        capture_warnings_in(logger)
    return logger


# Like `logging.captureWarnings`, but sends warnings to a logger of choice instead of
# the "py.warnings" logger

_warnings_showwarning: t.Optional[t.Callable] = None


def capture_warnings_in(logger: t.Optional[logging.Logger]):
    """Redirect all warnings to `logger`. Passing `None` restores the original warnings
    destination
    """
    global _warnings_showwarning
    if logger is None:
        if _warnings_showwarning is not None:
            warnings.showwarning = _warnings_showwarning
            _warnings_showwarning = None
        return
    if _warnings_showwarning is None:
        _warnings_showwarning = warnings.showwarning

    warnings.showwarning = functools.partial(_showwarning, logger)


def _showwarning(logger, message, category, filename, lineno, file=None, line=None):
    if file is not None:
        if _warnings_showwarning is not None:
            _warnings_showwarning(message, category, filename, lineno, file, line)
        return
    logger.warning("%s", warnings.formatwarning(message, category, filename, lineno, line))
